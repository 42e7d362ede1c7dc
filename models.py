"""
Project: Restaurant Directory (Foodie Finder)
Date: October 2025

Description:
Database models for the public restaurant catalog and the reservations
recorded after a confirmed payment.
"""

from flask_sqlalchemy import SQLAlchemy
from datetime import datetime

db = SQLAlchemy()

PRICE_BANDS = {
    "$": (None, 15),
    "$$": (15, 30),
    "$$$": (30, 60),
    "$$$$": (60, None),
}


def _money(value):
    return None if value is None else f"{value:.2f}"


class Restaurant(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    cuisine = db.Column(db.String(100), nullable=False)
    price_range = db.Column(db.String(10), nullable=False)
    average_price = db.Column(db.Numeric(10, 2), nullable=True)
    address = db.Column(db.Text, nullable=False)
    city = db.Column(db.String(100), nullable=False)
    state = db.Column(db.String(50))
    zip_code = db.Column(db.String(20))
    phone = db.Column(db.String(20))
    hours = db.Column(db.Text)
    image_url = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    menu_items = db.relationship('MenuItem', backref='restaurant', cascade="all, delete-orphan", lazy=True)
    reservations = db.relationship('Reservation', backref='restaurant', cascade="all, delete-orphan", lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "cuisine": self.cuisine,
            "price_range": self.price_range,
            "average_price": _money(self.average_price),
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "phone": self.phone,
            "hours": self.hours,
            "image_url": self.image_url,
        }

class MenuItem(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    restaurant_id = db.Column(db.Integer, db.ForeignKey('restaurant.id'), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    category = db.Column(db.String(100), nullable=False)
    image_url = db.Column(db.Text)

    def to_dict(self):
        return {"id": self.id, "restaurant_id": self.restaurant_id, "name": self.name, "description": self.description, "price": _money(self.price), "category": self.category, "image_url": self.image_url}

class Reservation(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    restaurant_id = db.Column(db.Integer, db.ForeignKey('restaurant.id'), nullable=False)
    name = db.Column(db.String(120), nullable=False)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    card_last4 = db.Column(db.String(4), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {"id": self.id, "restaurant_id": self.restaurant_id, "name": self.name, "amount": _money(self.amount), "card_last4": self.card_last4, "created_at": self.created_at.isoformat()}


def search_restaurants(search=None, cuisine=None, price=None):
    """Catalog listing ordered by name with the browse-page filters applied."""
    q = Restaurant.query
    if search:
        pattern = f"%{search.lower()}%"
        q = q.filter(db.or_(db.func.lower(Restaurant.name).like(pattern),
                            db.func.lower(Restaurant.description).like(pattern)))
    if cuisine:
        q = q.filter(db.func.lower(Restaurant.cuisine) == cuisine.lower())
    if price:
        if price not in PRICE_BANDS:
            raise ValueError(f"unknown price band: {price}")
        low, high = PRICE_BANDS[price]
        q = q.filter(Restaurant.average_price.isnot(None))
        if low is not None:
            q = q.filter(Restaurant.average_price >= low)
        if high is not None:
            q = q.filter(Restaurant.average_price < high)
    return q.order_by(Restaurant.name).all()
