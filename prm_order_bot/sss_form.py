"""
SSS application form (ASP.NET WebForms) filled tab by tab.

Every control is addressed by its full ASP.NET ``name``; most changes post
back to the server, so each step waits for the network to go idle.
"""

from . import config
from .data_generator import OrderRecord, generate_thai_id, random_first_name, random_last_name
from .error_handler import SSSPageNotOpenedError
from .run_params import RunParams

V = config.SSS_VALUES
APP = config.SSS_APP_DETAIL
CUSTOMER = config.SSS_CUSTOMER
HOME = config.SSS_HOME_ADDRESS
PAYER = config.SSS_PAYER
PAYER_DETAIL = config.SSS_PAYER_DETAIL
HEIR = config.SSS_HEIR
ROOT = config.SSS_ROOT

WORK_ADDRESS_TAB = "#__tab_ContentPlaceHolder1_TabContainer1_tabCustomerDetail_ucCustomerDetail1_tabContainMain_TabPanel2"
CONTACT_ADDRESS_TAB = "#__tab_ContentPlaceHolder1_TabContainer1_tabCustomerDetail_ucCustomerDetail1_tabContainMain_TabPanel3"


def is_sss_page(page) -> bool:
    return config.SSS_PAGE_MARKER in page.url


class SSSApplicationForm:
    def __init__(self, page, context, step_delay_ms: int = config.STEP_DELAY_MS):
        self.page = page
        self.context = context
        self.step_delay_ms = step_delay_ms

    # --- control helpers ---

    def _fill(self, name: str, value: str):
        self.page.fill(f'input[name="{name}"]', value)

    def _select(self, name: str, value: str):
        self.page.select_option(f'select[name="{name}"]', value)

    def _check(self, name: str, value: str):
        self.page.check(f'input[name="{name}"][value="{value}"]')
        self._idle()

    def _click(self, name: str):
        self.page.click(f'input[name="{name}"]')
        self._idle()

    def _idle(self):
        self.page.wait_for_load_state("networkidle")

    def _pause(self):
        self.page.wait_for_timeout(self.step_delay_ms)

    # --- tabs ---

    def wait_until_loaded(self):
        self._idle()
        print(f"✓ SSS app page loaded: {self.page.url}")
        if not is_sss_page(self.page):
            raise SSSPageNotOpenedError(self.page.url)

    def fill_application_detail(self, app_id: str, params: RunParams, data: OrderRecord):
        print("📝 Tab 1: Application detail")
        self._fill(APP + "txtAppID", app_id)
        self._select(APP + "ucMonthYearPeriod$ddlMonth", params.dcr_month)
        self._select(APP + "ucMonthYearPeriod$ddlYear", params.dcr_year)
        self._pause()

        self._select(APP + "ddlTitle", V['title'])
        self._fill(APP + "txtFirstName", data.first_name)
        self._fill(APP + "txtLastName", data.last_name)
        self._fill(APP + "ucBirthdate$txtDate", V['birth_date'])
        self.page.click("button.ui-datepicker-close")
        self._pause()

        self._select(APP + "ddlZebraCar", V['zebra_car'])
        self._select(APP + "ucUDWDay1$ddlTimePeriod", V['time_period'])
        self._pause()

        self.page.click(f'input[name="{ROOT}tabApplicationDetail$btnNextAppDetail"]')
        self._pause()
        self._click("ctl00$ContentPlaceHolder1$ucConfirmDialog$btnOK")

    def fill_customer_detail(self, data: OrderRecord):
        print("📝 Tab 2: Customer detail")
        self._fill(CUSTOMER + "ucZCardID1$txtCardID", data.thai_id)
        self._select(CUSTOMER + "ucOccupation1$ddlOccupation", V['occupation'])
        self._select(CUSTOMER + "ddlMaritalStatus", V['marital_status'])
        self._select(CUSTOMER + "ddlBloodType", V['blood_type'])
        self._select(CUSTOMER + "ddlSex", V['sex'])
        self._fill(CUSTOMER + "txtWeight", V['weight'])
        self._fill(CUSTOMER + "txtHeight", V['height'])
        self._fill(CUSTOMER + "txtHomePhone", V['blank'])
        self._fill(CUSTOMER + "txtWorkPhone", V['blank'])
        self._fill(CUSTOMER + "txtMobilePhone", data.tel)
        self._fill(CUSTOMER + "txtEmail", V['blank'])

        for field in ("txtNo", "txtVillageName", "txtMoo", "txtFloor", "txtSoi", "txtRoad"):
            self._fill(HOME + field, V['blank'])

        # province -> amphoe -> tumbol, each one posts back
        cascade = HOME + "ucProvinceAmphoeTumbol$"
        for field, value in (("ddlProvince", V['province']),
                             ("ddlAmphoe", V['amphoe']),
                             ("ddlTumbol", V['tumbol'])):
            self._select(cascade + field, value)
            self._idle()

        self._fill(HOME + "txtPhoneNo1", data.tel)

        self.page.click(WORK_ADDRESS_TAB)
        self._idle()
        self._check(CUSTOMER + "tabContainMain$TabPanel2$rdbWorkAddress", "rdbWorkAddressSameHome")

        self.page.click(CONTACT_ADDRESS_TAB)
        self._idle()
        self._check(CUSTOMER + "tabContainMain$TabPanel3$rdbContactAddress", "rdbContactAddressSameHome")

        self._click(ROOT + "tabCustomerDetail$btnNextCustDetail")

    def fill_payer_detail(self, params: RunParams, data: OrderRecord):
        print("📝 Tab 3: Payer detail")
        relation = params.payer_relation or config.PAYER_SELF
        self._select(PAYER + "ddlPayerRelationShip", relation)
        self._idle()

        # a payer other than the insured needs a full (synthetic) identity
        if relation != config.PAYER_SELF:
            self._check(PAYER_DETAIL + "rdbCard", "rdbZCardID")
            self._fill(PAYER_DETAIL + "ucZCardIDPayer$txtCardID", generate_thai_id())
            self._select(PAYER_DETAIL + "ddlTitle", V['title'])
            self._fill(PAYER_DETAIL + "txtFirstName", random_first_name())
            self._fill(PAYER_DETAIL + "txtLastName", random_last_name())
            self._select(PAYER_DETAIL + "ddlOccupation", V['occupation'])
            self._select(PAYER_DETAIL + "ddlOccupationLevel", V['occupation_level'])
            self._fill(PAYER_DETAIL + "txtEmail", V['blank'])
            self._fill(PAYER_DETAIL + "txtPhoneNumber", data.tel)
            self.page.click(f'input[name="{PAYER_DETAIL}btnCopyContactAddress"]')
            self._click(PAYER_DETAIL + "btnCopyWorkAddress")

        self._click(PAYER + "btnNextPayer")

    def fill_pay_premium(self):
        print("📝 Tab 4: Premium payment")
        self._select(ROOT + "tabPayPremiumPayer$ucPayerPayPremium$ddlPayMethod", V['pay_method'])
        self._idle()
        self._click(ROOT + "tabPayPremiumPayer$btnNextPayer")

    def fill_heir(self):
        print("📝 Tab 5: Beneficiary")
        self._click(HEIR + "ucHeir1$btnAdd")
        self._select(HEIR + "ucHeir1$ddlRelation", V['heir_relation'])
        self._idle()
        self._click(HEIR + "ucHeir1$btnSave")
        self._click(HEIR + "btnNextHeir")

    def fill_underwrite(self):
        print("📝 Tab 6: Underwrite")
        self._click(ROOT + "tabUnderwrite$btnGoodHealthAgent")
        self._check(ROOT + "tabUnderwrite$ucPHUnderwriteFromAgent$Result", "rdbPass")
        self._click(ROOT + "tabUnderwrite$btnNextUnderwrite")

    def accept_pdpa(self):
        """The PDPA button opens a popup; tick every consent box and save it"""
        with self.context.expect_page() as popup_info:
            self.page.click(f'input[name="{ROOT}tabMemo$ucPDPAData$btnPDPAData"]')
        pdpa_page = popup_info.value
        pdpa_page.wait_for_load_state("networkidle")

        for checkbox in pdpa_page.locator('input[type="checkbox"]').all():
            if not checkbox.is_checked():
                checkbox.check()

        pdpa_page.click("button#btn_save")
        pdpa_page.wait_for_timeout(self.step_delay_ms)
        pdpa_page.click("button.confirm")
        pdpa_page.wait_for_timeout(self.step_delay_ms)
        pdpa_page.close()
        self._idle()

    def fill_memo_and_finish(self):
        print("📝 Tab 7: Memo and PDPA")
        self._check(ROOT + "tabMemo$ucPHConsentDiseClose$Consent", "rdoConsentDiseClose")
        self.accept_pdpa()
        self._click(ROOT + "tabMemo$btnFinish_SendMO")

    def submit(self, app_id: str, params: RunParams, data: OrderRecord):
        """Walk every tab of the application and send it to MO"""
        self.fill_application_detail(app_id, params, data)
        self.fill_customer_detail(data)
        self.fill_payer_detail(params, data)
        self.fill_pay_premium()
        self.fill_heir()
        self.fill_underwrite()
        self.fill_memo_and_finish()
        print(f"✓ SSS form filled for: {data.full_name}")
