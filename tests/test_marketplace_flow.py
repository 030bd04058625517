from agrimarket.views import describe_orders


def test_farmer_to_buyer_order_flow(market):
    farmer = market.session.register({"name": "Ramesh", "email": "ramesh@example.com", "role": "farmer"})
    crop = market.listings.create_listing(
        {"name": "Tomatoes", "category": "Vegetables", "quantity": 100, "price": 20, "unit": "kg"},
        farmer.id, farmer.name,
    )
    assert crop.is_approved is False
    market.session.logout()

    market.session.login(market.config.admin_email, market.config.admin_password, "admin")
    assert market.admin.set_listing_approval(crop.id, True).is_approved is True
    market.session.logout()

    buyer = market.session.register({"name": "Anita", "email": "anita@example.com", "role": "buyer"})
    listed = market.listings.approved_listings()
    assert [c.id for c in listed] == [crop.id]
    order = market.order_manager.place_order(listed[0], buyer.id, 10)
    assert order.total_price == 200
    assert order.status == "pending"
    market.session.logout()

    market.session.login("ramesh@example.com", "", "farmer")
    incoming = market.order_manager.orders_for_farmer(market.session.current_user.id)
    assert [o.id for o in incoming] == [order.id]
    assert market.order_manager.set_order_status(order.id, "accept").status == "accepted"

    assert market.admin.platform_stats().total_revenue == 0


def test_deleted_user_leaves_orphans(market, farmer, buyer):
    crop = market.listings.create_listing(
        {"name": "Tomatoes", "category": "Vegetables", "quantity": 100, "price": 20, "unit": "kg"},
        farmer.id, farmer.name,
    )
    market.order_manager.place_order(crop, buyer.id, 1)
    market.admin.remove_user(buyer.id)

    assert len(market.crops.all()) == 1
    assert len(market.orders.all()) == 1
    view = describe_orders(market.orders.all(), market.crops.all(), market.users.all())[0]
    assert view.buyer_name == "Unknown"
