from django.core.management.base import BaseCommand, CommandError

from apps.storefront.client import ShopApiClient
from apps.storefront.session import StorefrontSession


class Command(BaseCommand):
    help = "Browse the catalog and place an order against a running storefront API"

    def add_arguments(self, parser):
        parser.add_argument('--api-url', type=str, default=None, help='API base URL (defaults to STOREFRONT_API_URL)')
        parser.add_argument('--add', type=int, action='append', default=[], metavar='PRODUCT_ID',
                            help='Add a product to the cart (repeat for more lines)')
        parser.add_argument('--payment', type=str, default='cash', help='Payment method for checkout')

    def handle(self, *args, **options):
        session = StorefrontSession(
            client=ShopApiClient(base_url=options['api_url']),
            on_cart_change=self._show_cart,
        )

        notice = session.open()
        if not notice.ok:
            raise CommandError(notice.message)

        for product in session.catalog:
            self.stdout.write(f"  #{product.id:<4} {product.name:<30} ৳{product.price:,}")

        if not options['add']:
            return

        for product_id in options['add']:
            self._report(session.add_to_cart(product_id))

        notice = session.place_order(options['payment'])
        self._report(notice)
        if not notice.ok:
            raise CommandError("Checkout failed; the cart was left as it was.")

    def _show_cart(self, cart):
        self.stdout.write(f"Cart: {len(cart)} items, total ৳{cart.total():,}")

    def _report(self, notice):
        style = self.style.SUCCESS if notice.ok else self.style.ERROR
        self.stdout.write(style(notice.message))
