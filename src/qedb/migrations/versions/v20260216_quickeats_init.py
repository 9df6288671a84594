"""Initial QuickEats schema and seed data.

Creates:
- user_role: enum of customer, courier, restaurant_owner, admin
- users, restaurants, menu_categories, menu_items
- cart_drafts, cart_items: cart being built before checkout
- orders, order_items, payments
- deliveries, delivery_tracking_events: realtime delivery tracking

Seeds a customer, a courier and a restaurant owner, the "QuickEats Pizza"
restaurant with its "Pizzas" and "Sides" categories, and three menu items.

Every statement is individually idempotent (IF NOT EXISTS, ON CONFLICT,
NOT EXISTS guards), so a partially applied run can be retried as a whole.
Requires PostgreSQL 13+ for gen_random_uuid().
"""

IDENTIFIER = "2026-02-16_quickeats_init"
DESCRIPTION = "QuickEats schema + seed"

_TYPES = [
    "DO $$ BEGIN IF NOT EXISTS (SELECT 1 FROM pg_type WHERE typname = 'user_role') "
    "THEN CREATE TYPE user_role AS ENUM ('customer','courier','restaurant_owner','admin'); "
    "END IF; END $$;",
]

_TABLES = [
    """CREATE TABLE IF NOT EXISTS users (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        email TEXT UNIQUE NOT NULL,
        password_hash TEXT NOT NULL,
        full_name TEXT NOT NULL,
        phone TEXT,
        role user_role NOT NULL DEFAULT 'customer',
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    );""",
    """CREATE TABLE IF NOT EXISTS restaurants (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        owner_user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        name TEXT NOT NULL,
        description TEXT,
        address TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    );""",
    """CREATE TABLE IF NOT EXISTS menu_categories (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        restaurant_id UUID NOT NULL REFERENCES restaurants(id) ON DELETE CASCADE,
        name TEXT NOT NULL,
        sort_order INT NOT NULL DEFAULT 0,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    );""",
    """CREATE TABLE IF NOT EXISTS menu_items (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        restaurant_id UUID NOT NULL REFERENCES restaurants(id) ON DELETE CASCADE,
        category_id UUID REFERENCES menu_categories(id) ON DELETE SET NULL,
        name TEXT NOT NULL,
        description TEXT,
        price_cents INT NOT NULL CHECK (price_cents >= 0),
        available BOOLEAN NOT NULL DEFAULT TRUE,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    );""",
    # Cart draft (order being built before checkout)
    """CREATE TABLE IF NOT EXISTS cart_drafts (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        restaurant_id UUID NOT NULL REFERENCES restaurants(id) ON DELETE CASCADE,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        UNIQUE(user_id, restaurant_id)
    );""",
    """CREATE TABLE IF NOT EXISTS cart_items (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        cart_id UUID NOT NULL REFERENCES cart_drafts(id) ON DELETE CASCADE,
        menu_item_id UUID NOT NULL REFERENCES menu_items(id) ON DELETE CASCADE,
        quantity INT NOT NULL CHECK (quantity > 0),
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        UNIQUE(cart_id, menu_item_id)
    );""",
    """CREATE TABLE IF NOT EXISTS orders (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        user_id UUID NOT NULL REFERENCES users(id) ON DELETE RESTRICT,
        restaurant_id UUID NOT NULL REFERENCES restaurants(id) ON DELETE RESTRICT,
        status TEXT NOT NULL DEFAULT 'pending',
        subtotal_cents INT NOT NULL DEFAULT 0 CHECK (subtotal_cents >= 0),
        delivery_fee_cents INT NOT NULL DEFAULT 0 CHECK (delivery_fee_cents >= 0),
        total_cents INT NOT NULL DEFAULT 0 CHECK (total_cents >= 0),
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    );""",
    """CREATE TABLE IF NOT EXISTS order_items (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        order_id UUID NOT NULL REFERENCES orders(id) ON DELETE CASCADE,
        menu_item_id UUID NOT NULL REFERENCES menu_items(id) ON DELETE RESTRICT,
        name_snapshot TEXT NOT NULL,
        price_cents_snapshot INT NOT NULL CHECK (price_cents_snapshot >= 0),
        quantity INT NOT NULL CHECK (quantity > 0),
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    );""",
    """CREATE TABLE IF NOT EXISTS payments (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        order_id UUID NOT NULL UNIQUE REFERENCES orders(id) ON DELETE CASCADE,
        provider TEXT NOT NULL DEFAULT 'mock',
        status TEXT NOT NULL DEFAULT 'unpaid',
        amount_cents INT NOT NULL CHECK (amount_cents >= 0),
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    );""",
    # Deliveries and tracking events (realtime tracking)
    """CREATE TABLE IF NOT EXISTS deliveries (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        order_id UUID NOT NULL UNIQUE REFERENCES orders(id) ON DELETE CASCADE,
        courier_user_id UUID REFERENCES users(id) ON DELETE SET NULL,
        status TEXT NOT NULL DEFAULT 'created',
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    );""",
    """CREATE TABLE IF NOT EXISTS delivery_tracking_events (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        delivery_id UUID NOT NULL REFERENCES deliveries(id) ON DELETE CASCADE,
        event_type TEXT NOT NULL,
        lat DOUBLE PRECISION,
        lng DOUBLE PRECISION,
        note TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    );""",
]


def _seed_user(email: str, full_name: str, role: str) -> str:
    return (
        "INSERT INTO users (email, password_hash, full_name, role) "
        f"VALUES ('{email}','demo_hash','{full_name}','{role}') "
        "ON CONFLICT (email) DO NOTHING;"
    )


def _seed_category(name: str, sort_order: int) -> str:
    return (
        "INSERT INTO menu_categories (restaurant_id, name, sort_order) "
        f"SELECT r.id, '{name}', {sort_order} FROM restaurants r "
        "WHERE r.name='QuickEats Pizza' AND NOT EXISTS "
        f"(SELECT 1 FROM menu_categories c WHERE c.restaurant_id=r.id AND c.name='{name}');"
    )


def _seed_item(category: str, name: str, description: str, price_cents: int) -> str:
    return (
        "INSERT INTO menu_items (restaurant_id, category_id, name, description, price_cents, available) "
        f"SELECT r.id, c.id, '{name}', '{description}', {price_cents}, TRUE FROM restaurants r "
        f"JOIN menu_categories c ON c.restaurant_id=r.id AND c.name='{category}' "
        "WHERE r.name='QuickEats Pizza' AND NOT EXISTS "
        f"(SELECT 1 FROM menu_items mi WHERE mi.restaurant_id=r.id AND mi.name='{name}');"
    )


_SEED = [
    _seed_user("customer1@quickeats.local", "Customer One", "customer"),
    _seed_user("courier1@quickeats.local", "Courier One", "courier"),
    _seed_user("owner1@quickeats.local", "Owner One", "restaurant_owner"),
    "INSERT INTO restaurants (owner_user_id, name, description, address) "
    "SELECT u.id, 'QuickEats Pizza', 'Hand-tossed pizza and sides', '123 Main St' "
    "FROM users u WHERE u.email='owner1@quickeats.local' "
    "AND NOT EXISTS (SELECT 1 FROM restaurants r WHERE r.name='QuickEats Pizza');",
    _seed_category("Pizzas", 1),
    _seed_category("Sides", 2),
    _seed_item("Pizzas", "Margherita", "Tomato, mozzarella, basil", 1299),
    _seed_item("Pizzas", "Pepperoni", "Pepperoni and mozzarella", 1499),
    _seed_item("Sides", "Garlic Knots", "Garlic butter knots", 699),
]

STATEMENTS = _TYPES + _TABLES + _SEED
