"""
Session cart.

Lines live in ``request.session['cart']`` keyed by product id. Each line keeps
the product's name, price and the stock known when it was last touched;
checkout revalidates against the database.
"""
from .exceptions import ConflictError
from .pricing import calculate_totals

CART_SESSION_KEY = 'cart'


class Cart:
    def __init__(self, session):
        self.session = session
        self.lines = dict(session.get(CART_SESSION_KEY) or {})

    def __iter__(self):
        for pid, line in self.lines.items():
            yield {"productId": int(pid), **line}

    def __len__(self):
        return len(self.lines)

    def __contains__(self, product_id):
        return str(product_id) in self.lines

    def _save(self):
        self.session[CART_SESSION_KEY] = self.lines
        self.session.modified = True

    @staticmethod
    def _clamp(quantity, stock):
        quantity = max(1, int(quantity))
        if stock:
            quantity = min(quantity, stock)
        return quantity

    def add(self, product, quantity=1):
        """Add or merge a product line, never above the product's stock."""
        if product.stock < 1:
            raise ConflictError(f'"{product.name}" is out of stock')
        key = str(product.pk)
        line = self.lines.get(key)
        requested = int(quantity) + (line["quantity"] if line else 0)
        self.lines[key] = {
            "name": product.name,
            "price": product.price,
            "imageUrl": product.image_url,
            "stock": product.stock,
            "quantity": self._clamp(requested, product.stock),
            "selected": True,
        }
        self._save()
        return self.lines[key]

    def remove(self, product_id):
        if self.lines.pop(str(product_id), None) is not None:
            self._save()

    def update_quantity(self, product_id, quantity):
        line = self.lines.get(str(product_id))
        if line is None:
            return None
        line["quantity"] = self._clamp(quantity, line.get("stock"))
        self._save()
        return line

    def toggle_selected(self, product_id):
        line = self.lines.get(str(product_id))
        if line is None:
            return None
        line["selected"] = not line.get("selected", True)
        self._save()
        return line

    def clear(self):
        self.lines = {}
        self._save()

    def remove_selected(self):
        self.lines = {pid: line for pid, line in self.lines.items() if not line.get("selected", True)}
        self._save()

    @property
    def selected_items(self):
        return [line for line in self if line.get("selected", True)]

    @property
    def count(self):
        return sum(line["quantity"] for line in self.selected_items)

    @property
    def total(self):
        return sum(line["quantity"] * line.get("price", 0) for line in self.selected_items)

    def summary(self):
        return calculate_totals(self.selected_items)

    def as_dict(self):
        return {
            "items": [{**line, "selected": line.get("selected", True)} for line in self],
            "cartCount": self.count,
            "cartTotal": self.total,
            "summary": self.summary().as_dict(),
        }

    def order_items(self):
        """Selected lines in the shape ``create_order`` expects."""
        return [{"productId": line["productId"], "quantity": line["quantity"]} for line in self.selected_items]
