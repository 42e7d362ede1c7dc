"""
Project: Restaurant Directory (Foodie Finder)
Date: October 2025

Description:
Seeds the catalog with demo restaurants and menu items when it is empty.
"""

from decimal import Decimal
from models import db, Restaurant, MenuItem


def seed():
    if Restaurant.query.count() > 0:
        return False

    bella = Restaurant(
        name="La Bella Italia",
        description="Authentic Italian cuisine with fresh pasta and wood-fired pizzas. Family-owned restaurant serving traditional recipes passed down through generations.",
        cuisine="Italian",
        price_range="$$",
        address="123 Main Street",
        city="San Francisco",
        state="CA",
        zip_code="94102",
        phone="(415) 555-0123",
        hours="Mon-Thu: 11am-10pm\nFri-Sat: 11am-11pm\nSun: 12pm-9pm",
    )
    sakura = Restaurant(
        name="Sakura Sushi Bar",
        description="Premium sushi and Japanese cuisine featuring the freshest seafood and traditional techniques. Omakase menu available.",
        cuisine="Japanese",
        price_range="$$$",
        average_price=Decimal("45.00"),
        address="456 Market Street",
        city="San Francisco",
        state="CA",
        zip_code="94103",
        phone="(415) 555-0456",
        hours="Tue-Sun: 5pm-11pm\nClosed Monday",
    )
    burger = Restaurant(
        name="The Burger Joint",
        description="Classic American burgers made with locally sourced beef and fresh ingredients. Craft beer selection and homemade milkshakes.",
        cuisine="American",
        price_range="$",
        average_price=Decimal("14.00"),
        address="789 Castro Street",
        city="San Francisco",
        state="CA",
        zip_code="94114",
        phone="(415) 555-0789",
        hours="Daily: 11am-10pm",
    )
    db.session.add_all([bella, sakura, burger])
    db.session.flush()

    db.session.add_all([
        MenuItem(restaurant_id=bella.id, name="Margherita Pizza", price=Decimal("16.99"), category="Pizza",
                 description="Classic pizza with tomato sauce, fresh mozzarella, and basil"),
        MenuItem(restaurant_id=bella.id, name="Spaghetti Carbonara", price=Decimal("18.99"), category="Pasta",
                 description="Traditional Roman pasta with eggs, pecorino cheese, and guanciale"),
        MenuItem(restaurant_id=sakura.id, name="Chef's Omakase", price=Decimal("85.00"), category="Omakase",
                 description="12-piece chef's selection of premium sushi and sashimi"),
        MenuItem(restaurant_id=sakura.id, name="Spicy Tuna Roll", price=Decimal("14.50"), category="Rolls",
                 description="Fresh tuna with spicy mayo and cucumber"),
        MenuItem(restaurant_id=burger.id, name="Classic Cheeseburger", price=Decimal("12.99"), category="Burgers",
                 description="8oz beef patty with cheddar, lettuce, tomato, and special sauce"),
        MenuItem(restaurant_id=burger.id, name="Truffle Fries", price=Decimal("8.99"), category="Sides",
                 description="Hand-cut fries with truffle oil and parmesan"),
    ])
    db.session.commit()
    return True


if __name__ == "__main__":
    from app import create_app

    app = create_app()
    with app.app_context():
        if seed():
            print("Seeded 3 restaurants.")
        else:
            print("Catalog already has restaurants; nothing to do.")
