# main.py

from rich.console import Console
from rich.table import Table
from dotenv import load_dotenv

from agrimarket.marketplace import Marketplace

load_dotenv()
console = Console()

DEMO_FARMER = {"name": "Ramesh Patil", "email": "ramesh@example.com", "role": "farmer", "location": "Pune, Maharashtra"}
DEMO_BUYER = {"name": "Anita Shah", "email": "anita@example.com", "role": "buyer", "location": "Mumbai, Maharashtra"}
DEMO_CROPS = [
    {"name": "Tomatoes", "category": "Vegetables", "quantity": 100, "price": 20, "unit": "kg",
     "location": "Pune", "delivery_options": ["Farm Pickup", "Local Delivery"]},
    {"name": "Onions", "category": "Vegetables", "quantity": 40, "price": 1750, "unit": "quintal",
     "location": "Nashik", "delivery_options": ["Transport Available"]},
    {"name": "Basmati Rice", "category": "Grains", "quantity": 12, "price": 3000, "unit": "quintal",
     "location": "Ludhiana", "delivery_options": ["Farm Pickup"]},
]

def seed(market: Marketplace):
    """Adds a demo farmer, buyer and listings if the store has no users yet."""
    if market.users.all():
        console.print("[yellow]Store already has users, skipping seed.[/yellow]")
        return

    farmer = market.session.register(DEMO_FARMER)
    crops = [market.listings.create_listing(data, farmer.id, farmer.name) for data in DEMO_CROPS]
    # Approve the first listing so the buyer has something to order
    market.admin.set_listing_approval(crops[0].id, True)

    buyer = market.session.register(DEMO_BUYER)
    market.order_manager.place_order(market.crops.require(crops[0].id), buyer.id, 10)
    market.messaging.send_message(buyer, farmer.id, farmer.name, "Are the tomatoes ready for pickup this week?")
    market.session.logout()
    console.print("[bold green]Seeded demo data.[/bold green]")

def print_stats(market: Marketplace):
    stats = market.admin.platform_stats()
    table = Table(title="Platform Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    for name, value in stats.model_dump().items():
        table.add_row(name.replace("_", " ").title(), f"{value:g}" if isinstance(value, float) else str(value))
    console.print(table)

# Run the application
if __name__ == "__main__":
    console.print("[bold blue]---Seeding AgriMarket store---[/bold blue]")
    marketplace = Marketplace()
    seed(marketplace)
    print_stats(marketplace)
