# app.py

import streamlit as st
from agrimarket.marketplace import Marketplace
from agrimarket.market_prices import get_market_prices, search_market_prices
from agrimarket.models import CATEGORIES, UNITS, DELIVERY_OPTIONS
from agrimarket import views

# --- Page & State Configuration ---
st.set_page_config(page_title="AgriMarket", page_icon="🌾", layout="wide")

def initialize_session_state():
    """Initializes all necessary session state variables."""
    # Initialize the marketplace once; it restores any saved session itself
    if "marketplace" not in st.session_state:
        st.session_state.marketplace = Marketplace()
    if "editing_crop_id" not in st.session_state:
        st.session_state.editing_crop_id = None
    if "chat_with" not in st.session_state:
        st.session_state.chat_with = None

def market() -> Marketplace:
    return st.session_state.marketplace

# --- Authentication Logic ---
def show_login_signup_page():
    """Displays the login and registration forms."""
    st.title("Welcome to AgriMarket 🌾")
    st.caption("Farmers list crops, buyers order directly from them.")

    login_tab, signup_tab = st.tabs(["Login", "Register"])

    with login_tab:
        with st.form("login_form"):
            email = st.text_input("Email", key="login_email")
            password = st.text_input("Password", type="password", key="login_password")
            role = st.selectbox("I am a", ["farmer", "buyer", "admin"], key="login_role")
            submitted = st.form_submit_button("Login")
            if submitted:
                if market().session.login(email, password, role):
                    st.success("Logged in successfully!")
                    st.rerun()
                else:
                    st.error("Invalid credentials for that role.")

    with signup_tab:
        with st.form("signup_form"):
            name = st.text_input("Full Name")
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            role = st.selectbox("Register as", ["farmer", "buyer"])
            phone = st.text_input("Phone")
            aadhaar = st.text_input("Aadhaar (farmers)")
            location = st.text_input("Location")
            submitted = st.form_submit_button("Register")
            if submitted:
                try:
                    market().session.register({
                        "name": name, "email": email, "password": password, "role": role,
                        "phone": phone or None, "aadhaar": aadhaar or None, "location": location or None,
                    })
                    st.success("Account created!")
                    st.rerun()
                except ValueError as e:
                    st.error(e)

# --- Shared Widgets ---
def show_sidebar():
    user = market().session.current_user
    with st.sidebar:
        st.header(f"Welcome, {user.name}!")
        st.caption(f"Signed in as {user.role}")
        if st.button("Logout"):
            market().session.logout()
            for key in list(st.session_state.keys()):
                if key != "marketplace":
                    del st.session_state[key]
            st.rerun()

def show_chat(other_id: str, other_name: str):
    """Displays one conversation and a reply box."""
    m = market()
    user = m.session.current_user
    st.subheader(f"Chat with {other_name}")
    for msg in m.messaging.get_conversation_between(user.id, other_id):
        with st.chat_message("human" if msg.sender_id == user.id else "ai"):
            st.markdown(f"**{msg.sender_name}**: {msg.content}")
    if prompt := st.chat_input("Type your message...", key=f"chat_input_{other_id}"):
        if m.messaging.send_message(user, other_id, other_name, prompt):
            st.rerun()

def show_market_prices():
    term = st.text_input("Search by crop, state, or district...", key="price_search")
    for price in search_market_prices(get_market_prices(), term):
        with st.container(border=True):
            st.markdown(f"**{price.crop}** ({price.variety}, {price.grade})")
            st.caption(f"{price.market}, {price.district}, {price.state} on {price.date}")
            st.write(f"Min ₹{price.min_price:g} | Modal ₹{price.modal_price:g} | Max ₹{price.max_price:g}")

def show_crop_form(editing=None):
    """Add/edit form for a listing. Saving always sends it back for approval."""
    m = market()
    user = m.session.current_user
    form_key = f"crop_form_{editing.id}" if editing else "crop_form_new"
    with st.form(form_key, clear_on_submit=editing is None):
        name = st.text_input("Crop Name *", value=editing.name if editing else "")
        category = st.selectbox("Category *", CATEGORIES,
                                index=CATEGORIES.index(editing.category) if editing and editing.category in CATEGORIES else 0)
        quantity = st.number_input("Quantity *", min_value=0.0, value=float(editing.quantity) if editing else 0.0)
        unit = st.selectbox("Unit *", UNITS, index=UNITS.index(editing.unit) if editing and editing.unit in UNITS else 0)
        price = st.number_input("Price per unit (₹) *", min_value=0.0, value=float(editing.price) if editing else 0.0)
        description = st.text_area("Description", value=editing.description if editing else "")
        location = st.text_input("Location", value=editing.location if editing else (user.location or ""))
        available_to = st.text_input("Available until (YYYY-MM-DD)", value=editing.available_to if editing else "")
        delivery = st.multiselect("Delivery Options", DELIVERY_OPTIONS,
                                  default=editing.delivery_options if editing else [])
        submitted = st.form_submit_button("Update Crop" if editing else "Add Crop")
        if submitted:
            data = {
                "name": name, "category": category, "quantity": quantity, "unit": unit, "price": price,
                "description": description, "location": location, "available_to": available_to,
                "delivery_options": delivery,
            }
            try:
                if editing:
                    m.listings.update_listing(editing.id, data)
                    st.session_state.editing_crop_id = None
                else:
                    m.listings.create_listing(data, user.id, user.name)
                st.success("Crop saved and sent for approval")
                st.rerun()
            except ValueError as e:
                st.error(e)

# --- Farmer Dashboard ---
def show_farmer_dashboard():
    m = market()
    user = m.session.current_user
    st.title("Farmer Dashboard")

    my_crops = m.listings.listings_for_farmer(user.id)
    stats = views.farmer_stats(my_crops)
    cols = st.columns(4)
    cols[0].metric("Total Crops", stats.total_crops)
    cols[1].metric("Approved", stats.approved_crops)
    cols[2].metric("Pending Approval", stats.pending_crops)
    cols[3].metric("Listing Value", f"₹{stats.total_value:,.0f}")

    crops_tab, add_tab, orders_tab, inbox_tab, prices_tab = st.tabs(
        ["My Crops", "Add Crop", "Orders", "Messages", "Market Prices"])

    with crops_tab:
        if not my_crops:
            st.info("No crops listed yet.")
        for crop in my_crops:
            with st.container(border=True):
                st.markdown(f"**{crop.name}** ({crop.category}) {'✅ Approved' if crop.is_approved else '⏳ Pending'}")
                st.write(f"Quantity: {crop.quantity:g} {crop.unit} | Price: ₹{crop.price:g}/{crop.unit}")
                edit_col, delete_col = st.columns(2)
                if edit_col.button("Edit", key=f"edit_{crop.id}"):
                    st.session_state.editing_crop_id = crop.id
                    st.rerun()
                if delete_col.button("Delete", key=f"delete_{crop.id}"):
                    m.listings.delete_listing(crop.id)
                    st.rerun()
                if st.session_state.editing_crop_id == crop.id:
                    show_crop_form(editing=crop)

    with add_tab:
        show_crop_form()

    with orders_tab:
        farmer_orders = m.order_manager.orders_for_farmer(user.id)
        if not farmer_orders:
            st.info("No orders yet.")
        for view in views.describe_orders(farmer_orders, m.crops.all(), m.users.all()):
            order = view.order
            with st.container(border=True):
                st.markdown(f"**{view.crop_name}** [{order.status.capitalize()}]")
                st.write(f"Buyer: {view.buyer_name} | Quantity: {order.quantity:g} {view.unit} | Total: ₹{order.total_price:g}")
                if order.status == "pending":
                    accept_col, reject_col = st.columns(2)
                    if accept_col.button("Accept", key=f"accept_{order.id}"):
                        m.order_manager.set_order_status(order.id, "accept")
                        st.rerun()
                    if reject_col.button("Reject", key=f"reject_{order.id}"):
                        m.order_manager.set_order_status(order.id, "reject")
                        st.rerun()

    with inbox_tab:
        show_inbox()

    with prices_tab:
        show_market_prices()

def show_inbox():
    m = market()
    user = m.session.current_user
    names = {u.id: u.name for u in m.users.all()}
    chats = m.messaging.conversations_for(user.id)
    if not chats:
        st.info("No conversations yet.")
    for chat_id, other_id, last in chats:
        other_name = names.get(other_id, views.UNKNOWN)
        if st.button(f"{other_name}: {last.content[:40]}", key=f"chat_{chat_id}"):
            st.session_state.chat_with = (other_id, other_name)
            st.rerun()
    if st.session_state.chat_with:
        show_chat(*st.session_state.chat_with)

# --- Buyer Dashboard ---
def show_buyer_dashboard():
    m = market()
    user = m.session.current_user
    st.title("Buyer Dashboard")
    st.caption(f"Welcome back, {user.name}! Find fresh crops from local farmers.")

    my_orders = m.order_manager.orders_for_buyer(user.id)
    stats = views.buyer_stats(my_orders)
    cols = st.columns(3)
    cols[0].metric("Total Orders", stats.total_orders)
    cols[1].metric("Pending Orders", stats.pending_orders)
    cols[2].metric("Completed Orders", stats.completed_orders)

    browse_tab, orders_tab, inbox_tab, prices_tab = st.tabs(["Browse Crops", "Recent Orders", "Messages", "Market Prices"])

    with browse_tab:
        approved = m.listings.approved_listings()
        search_col, category_col, min_col, max_col = st.columns([3, 2, 1, 1])
        search = search_col.text_input("Search crops, locations, or farmers...")
        category = category_col.selectbox("Category", views.listing_categories(approved))
        min_price = min_col.number_input("Min ₹", min_value=0.0, value=0.0)
        max_price = max_col.number_input("Max ₹", min_value=0.0, value=0.0, help="0 means no limit")
        results = views.filter_listings(approved, search=search, category=category,
                                        min_price=min_price or None, max_price=max_price or None)
        if not results:
            st.info("No crops found matching your criteria.")
        for crop in results:
            with st.container(border=True):
                st.markdown(f"**{crop.name}** ({crop.category}) by {crop.farmer_name}")
                st.write(f"₹{crop.price:g}/{crop.unit} | Available: {crop.quantity:g} {crop.unit} | {crop.location}")
                if crop.delivery_options:
                    st.caption(", ".join(crop.delivery_options))
                with st.form(f"order_{crop.id}"):
                    quantity = st.number_input(f"Quantity ({crop.unit})", min_value=0.0,
                                               max_value=float(crop.quantity), value=min(1.0, float(crop.quantity)))
                    st.caption(f"Total: ₹{quantity * crop.price:g}")
                    if st.form_submit_button("Place Order"):
                        try:
                            m.order_manager.place_order(crop, user.id, quantity)
                            st.success("Order placed successfully! The farmer will be notified.")
                        except ValueError as e:
                            st.error(e)
                if st.button("Contact Farmer", key=f"contact_{crop.id}"):
                    st.session_state.chat_with = (crop.farmer_id, crop.farmer_name)
                    st.info("Open the Messages tab to chat with the farmer.")

    with orders_tab:
        recent = views.recent_orders(my_orders)
        if not recent:
            st.info("No orders yet.")
        for view in views.describe_orders(recent, m.crops.all(), m.users.all()):
            st.write(f"{view.crop_name}: {view.order.quantity:g} {view.unit} • ₹{view.order.total_price:g} "
                     f"[{view.order.status.capitalize()}]")

    with inbox_tab:
        show_inbox()

    with prices_tab:
        show_market_prices()

# --- Admin Dashboard ---
def show_admin_dashboard():
    m = market()
    st.title("Admin Dashboard")

    stats = m.admin.platform_stats()
    cols = st.columns(4)
    cols[0].metric("Total Users", stats.total_users, f"{stats.total_farmers} farmers, {stats.total_buyers} buyers")
    cols[1].metric("Total Crops", stats.total_crops, f"{stats.pending_approvals} pending")
    cols[2].metric("Total Orders", stats.total_orders, f"{stats.pending_orders} pending")
    cols[3].metric("Revenue", f"₹{stats.total_revenue:,.0f}")

    search = st.text_input("Search...", key="admin_search")
    crops_tab, users_tab, orders_tab = st.tabs(["Crop Approvals", "Users", "Orders"])

    with crops_tab:
        for crop in m.crops.all():
            if search and not views.filter_listings([crop], search=search):
                continue
            with st.container(border=True):
                st.markdown(f"**{crop.name}** by {crop.farmer_name} {'✅ Approved' if crop.is_approved else '⏳ Pending'}")
                st.write(f"Quantity: {crop.quantity:g} {crop.unit} | Price: ₹{crop.price:g}/{crop.unit}")
                if not crop.is_approved:
                    approve_col, reject_col = st.columns(2)
                    if approve_col.button("Approve", key=f"approve_{crop.id}"):
                        m.admin.set_listing_approval(crop.id, True)
                        st.rerun()
                    if reject_col.button("Reject", key=f"reject_crop_{crop.id}"):
                        m.admin.set_listing_approval(crop.id, False)
                        st.rerun()

    with users_tab:
        for u in views.search_users(m.users.all(), search):
            name_col, delete_col = st.columns([4, 1])
            name_col.write(f"**{u.name}** ({u.role}) {u.email}")
            if delete_col.button("Delete", key=f"delete_user_{u.id}"):
                m.admin.remove_user(u.id)
                st.rerun()

    with orders_tab:
        for view in views.describe_orders(m.orders.all(), m.crops.all(), m.users.all()):
            st.write(f"{view.crop_name} [{view.order.status.capitalize()}] Farmer: {view.farmer_name}, "
                     f"Buyer: {view.buyer_name}, {view.order.quantity:g} {view.unit}, ₹{view.order.total_price:g}")


# --- Application Entry Point ---
initialize_session_state()

session = market().session
if not session.is_authenticated:
    show_login_signup_page()
else:
    show_sidebar()
    if session.has_role("farmer"):
        show_farmer_dashboard()
    elif session.has_role("buyer"):
        show_buyer_dashboard()
    else:
        show_admin_dashboard()
