"""
PRM order portal steps: create a health order, pay it, open its SSS app
"""

from playwright.sync_api import Error as PlaywrightError

from . import config
from .data_generator import OrderRecord
from .error_handler import is_frame_detached

SEL = config.ORDER_SELECTORS
TEXT = config.ORDER_TEXT


class OrderPortal:
    def __init__(self, page, step_delay_ms: int = config.STEP_DELAY_MS):
        self.page = page
        self.step_delay_ms = step_delay_ms

    def _pause(self, ms: int = None):
        self.page.wait_for_timeout(self.step_delay_ms if ms is None else ms)

    def _button(self, selector: str, text: str):
        return self.page.locator(selector, has_text=text)

    def _customer_row(self, full_name: str):
        return self.page.locator("tr", has=self.page.locator("td", has_text=full_name))

    def open_home(self):
        print(f"🔄 Navigating to: {config.PRM_BASE_URL}")
        self.page.goto(config.PRM_BASE_URL)
        self.page.wait_for_load_state("networkidle")
        self.page.bring_to_front()

    def _open_order_page(self):
        if self.page.is_closed():
            self.page = self.page.context.new_page()
        try:
            self.page.wait_for_url(config.PRM_URL_PATTERN, timeout=config.ORDER_URL_TIMEOUT_MS)
            self.page.goto(config.ORDER_PAGE_URL)
        except PlaywrightError as e:
            if not is_frame_detached(e):
                raise
            print("⚠️  Frame detached, reopening the order page in a new tab...")
            self.page = self.page.context.new_page()
            self.page.goto(config.ORDER_PAGE_URL)
        self.page.wait_for_load_state("networkidle")

    def create_order(self, data: OrderRecord):
        """Create and pay a health insurance order; returns the page that is still alive"""
        self._open_order_page()
        print("✓ Navigated to order page")

        page = self.page
        page.fill(SEL['card_detail'], data.thai_id)
        self._pause()
        page.click(SEL['card_type_dropdown'])
        self._pause()
        page.fill(SEL['first_name'], data.first_name)
        self._pause()
        page.fill(SEL['last_name'], data.last_name)
        self._pause()
        page.fill(SEL['phone_number'], data.tel)
        self._button(SEL['submit_button'], TEXT['health_insurance']).click()
        self._pause()

        self._button(SEL['dropdown_button'], TEXT['choose_plan']).click()
        self._pause()
        page.click(SEL['plan_option'])
        self._pause()
        self._button(SEL['dropdown_button'], TEXT['choose_type']).click()
        self._pause()
        page.click(SEL['type_option'])
        self._pause()
        page.fill(SEL['customer_name'], config.ORDER_CUSTOMER_NAME)
        self._button(SEL['submit_button'], TEXT['confirm']).click()
        self._pause()

        self._button(SEL['submit_button'], TEXT['pay']).click()
        self._pause()
        self._button(SEL['plain_button'], TEXT['confirm']).click()
        self._pause()
        page.click(SEL['cash_payment'])
        self._pause()
        self._button(SEL['plain_button'], TEXT['confirm']).click()
        self._pause()
        # two SweetAlert dialogs follow the payment choice
        for _ in range(2):
            self._button(SEL['swal_confirm'], TEXT['confirm']).click()
            self._pause()

        print("✓ Order process completed")
        return page

    def process_payment(self, full_name: str):
        """Mark the customer's order as paid from the management page"""
        page = self.page
        page.goto(config.MANAGEMENT_PAGE_URL)
        self._pause()

        row = self._customer_row(full_name)
        row.locator(SEL['plain_button'], has_text=TEXT['actions']).click()
        self._pause()
        page.get_by_role("button", name=TEXT['sit_payment']).click()
        self._button(SEL['swal_confirm'], TEXT['confirm']).click()
        self._pause(config.PAYMENT_SETTLE_MS)
        print(f"✓ Payment confirmed for: {full_name}")

    def open_sss_page(self, full_name: str):
        """Open the SSS application for the paid order; it appears as a new tab"""
        page = self.page
        if "premiummanagementpages" not in page.url:
            page.goto(config.MANAGEMENT_PAGE_URL)
            page.wait_for_load_state("networkidle")
        self._pause()

        page.get_by_role("tab", name=TEXT['paid_tab']).click()
        paid_row = self._customer_row(full_name)
        paid_row.locator("td").nth(0).click()
        self._pause()

        # the nested table is a div[role=table] inside the expanded cell
        nested_row = page.locator(config.NESTED_TABLE_SELECTOR).locator("tbody tr").first
        nested_row.locator(SEL['plain_button'], has_text=TEXT['actions']).click()
        page.get_by_role("button", name=TEXT['open_app']).click()
        self._pause()
        print(f"✓ Opened SSS app for: {full_name}")
