"""
Project: Restaurant Directory (Foodie Finder)
Date: October 2025

Description:
Main application entry point. Initializes Flask, database, and Socket.IO.
Serves the public restaurant catalog and the payment dialog sessions used to
reserve a table.
"""

import logging
from decimal import Decimal

from flask import Flask, request, jsonify
from flask_socketio import SocketIO
from models import db, Restaurant, MenuItem, Reservation, search_restaurants
from payment import PaymentContext, PaymentSessionRegistry, PaymentStateError, SocketIOScheduler
from config import Config

# Create SocketIO once (no app yet), then bind inside factory
socketio = SocketIO(cors_allowed_origins="*")


def json_error(message, code=400):
    return jsonify({"ok": False, "error": message}), code


def create_app(testing: bool = False):
    app = Flask(__name__)
    app.config.from_object(Config)

    if testing:
        app.config["TESTING"] = True
        app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///:memory:"
        app.config["SOCKETIO_ASYNC_MODE"] = "threading"
        app.config["PAYMENT_PROCESSING_DELAY"] = 0
        app.config["PAYMENT_DISPLAY_DELAY"] = 0

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db.init_app(app)
    socketio.init_app(app, async_mode=app.config["SOCKETIO_ASYNC_MODE"])

    payments = PaymentSessionRegistry(
        SocketIOScheduler(socketio),
        processing_delay=app.config["PAYMENT_PROCESSING_DELAY"],
        display_delay=app.config["PAYMENT_DISPLAY_DELAY"],
        idle_timeout=app.config["PAYMENT_IDLE_TIMEOUT"],
    )
    app.extensions["payments"] = payments

    with app.app_context():
        db.create_all()

    # --------- helpers ---------
    def payment_context(restaurant):
        amount = restaurant.average_price
        if amount is None:
            amount = app.config["DEFAULT_RESERVATION_AMOUNT"]
        else:
            amount = f"{amount:.2f}"
        return PaymentContext(restaurant_name=restaurant.name, amount=amount)

    def record_reservation(restaurant_id):
        # Deferred callbacks run outside any request, so push our own context
        def _confirmed(form, confirmation):
            with app.app_context():
                r = Reservation(
                    restaurant_id=restaurant_id,
                    name=confirmation.cardholder_name,
                    amount=Decimal(confirmation.amount),
                    card_last4=confirmation.card_last4,
                )
                db.session.add(r)
                db.session.commit()
                app.logger.info("reservation %s recorded for restaurant %s", r.id, restaurant_id)
                event = {"type": "payment.confirmed", "reservation": r.to_dict()}
                event.update(confirmation.to_dict())
                socketio.emit("event", event)
        return _confirmed

    def payment_closed(form):
        socketio.emit("event", {"type": "payment.closed", "session_id": form.id})

    def find_payment(session_id):
        form = payments.get(session_id)
        if form is None:
            return None, json_error("not_found", 404)
        return form, None

    # ---------- RESTAURANTS ----------
    @app.get("/api/restaurants")
    def list_restaurants():
        try:
            items = search_restaurants(
                search=(request.args.get("search") or "").strip(),
                cuisine=(request.args.get("cuisine") or "").strip(),
                price=(request.args.get("price") or "").strip(),
            )
        except ValueError as e:
            return json_error(str(e), 400)
        return jsonify([r.to_dict() for r in items])

    @app.get("/api/restaurants/<int:restaurant_id>")
    def get_restaurant(restaurant_id):
        r = db.get_or_404(Restaurant, restaurant_id)
        return jsonify(r.to_dict())

    @app.get("/api/restaurants/<int:restaurant_id>/menu")
    def restaurant_menu(restaurant_id):
        db.get_or_404(Restaurant, restaurant_id)
        items = (MenuItem.query.filter_by(restaurant_id=restaurant_id)
                 .order_by(MenuItem.category, MenuItem.name).all())
        return jsonify([m.to_dict() for m in items])

    @app.get("/api/menu-items")
    def list_menu_items():
        items = MenuItem.query.order_by(MenuItem.name).all()
        return jsonify([m.to_dict() for m in items])

    @app.get("/api/menu-items/<int:item_id>")
    def get_menu_item(item_id):
        m = db.get_or_404(MenuItem, item_id)
        return jsonify(m.to_dict())

    # ---------- PAYMENTS ----------
    @app.post("/api/restaurants/<int:restaurant_id>/payments")
    def open_payment(restaurant_id):
        r = db.get_or_404(Restaurant, restaurant_id)
        form = payments.open(
            payment_context(r),
            on_confirmed=record_reservation(r.id),
            on_closed=payment_closed,
        )
        return jsonify(form.to_dict()), 201

    @app.get("/api/payments/<session_id>")
    def get_payment(session_id):
        form, resp = find_payment(session_id)
        if resp:
            return resp
        return jsonify(form.to_dict())

    @app.patch("/api/payments/<session_id>")
    def update_payment(session_id):
        form, resp = find_payment(session_id)
        if resp:
            return resp
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return json_error("expected_object", 400)
        try:
            form.update(**data)
        except KeyError as e:
            return json_error(f"unknown_field: {e.args[0]}", 400)
        except PaymentStateError as e:
            return json_error(str(e), 409)
        return jsonify(form.to_dict())

    @app.post("/api/payments/<session_id>/submit")
    def submit_payment(session_id):
        form, resp = find_payment(session_id)
        if resp:
            return resp
        try:
            result = form.submit()
        except PaymentStateError as e:
            return json_error(str(e), 409)
        if not result.ok:
            body = {"ok": False}
            body.update(result.error.to_dict())
            return jsonify(body), 422
        return jsonify({"ok": True, "payment": form.to_dict()}), 202

    @app.delete("/api/payments/<session_id>")
    def close_payment(session_id):
        payments.close(session_id)
        return jsonify({"ok": True})

    # ---------- HEALTH ----------
    @app.get("/api/health")
    def health():
        return jsonify({"ok": True})

    @app.errorhandler(404)
    def _err_404(_e):
        return json_error("not_found", 404)

    @app.errorhandler(405)
    def _err_405(_e):
        return json_error("method_not_allowed", 405)

    return app
