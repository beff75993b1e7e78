"""
Configuration for the PRM order / SSS application entry bot
"""

import os

from dotenv import load_dotenv

load_dotenv()

# PRM order portal URLs
PRM_BASE_URL = "https://prmorder.uatsiamsmile.com/"
PRM_URL_PATTERN = "https://prmorder.uatsiamsmile.com/**"
ORDER_PAGE_URL = "https://prmorder.uatsiamsmile.com/premiumnoticepages"
MANAGEMENT_PAGE_URL = "https://prmorder.uatsiamsmile.com/premiummanagementpages"

# The SSS application form opens in a new tab with this page
SSS_PAGE_MARKER = "frmPHNewApp1.aspx"

# Run defaults
DEFAULT_TEL = os.getenv("DEFAULT_TEL", "0836151973")
PAYER_SELF = "3000"
PAYER_OTHER = "3042"
PAYER_RELATIONS = {
    PAYER_SELF: "ตัวเอง (ผู้ชำระเป็นผู้เอาประกัน)",
    PAYER_OTHER: "บุคคลอื่น",
}

# Order form values
ORDER_PLAN_VALUE = "56"
ORDER_TYPE_VALUE = "2"
ORDER_CUSTOMER_NAME = "ทดสอบ ระบบ"

# Selectors for the PRM order flow
ORDER_SELECTORS = {
    'card_detail': 'input[name="cardDetail"]',
    'card_type_dropdown': 'div[role="button"][aria-haspopup="listbox"]',
    'first_name': 'input[name="firstName"]',
    'last_name': 'input[name="lastName"]',
    'phone_number': 'input[name="phoneNumber"]',
    'submit_button': 'button[type="submit"]',
    'dropdown_button': 'div[role="button"]',
    'plan_option': f'li[data-value="{ORDER_PLAN_VALUE}"]',
    'type_option': f'li[data-value="{ORDER_TYPE_VALUE}"]',
    'customer_name': 'textarea[name="customerName"]',
    'plain_button': 'button[type="button"]',
    'cash_payment': 'input[name="rdoPayment"][value="1"]',
    'swal_confirm': 'button.swal2-confirm',
}

# Button captions on the PRM portal
ORDER_TEXT = {
    'health_insurance': "ประกันสุขภาพ",
    'choose_plan': "เลือกแผนประกัน",
    'choose_type': "เลือกประเภท",
    'confirm': "ยืนยัน",
    'pay': "ชำระเงิน",
    'actions': "...",
    'sit_payment': "จ่ายเงิน (สำหรับ SIT เท่านั้น)",
    'paid_tab': "รับชำระแล้ว",
    'open_app': "เปิดหน้าแอพ",
}

# Nested order table shown when a paid row is expanded
NESTED_TABLE_SELECTOR = 'td[colspan="12"] div[role="table"]'

# ASP.NET control name prefixes on the SSS form
SSS_ROOT = "ctl00$ContentPlaceHolder1$TabContainer1$"
SSS_APP_DETAIL = SSS_ROOT + "tabApplicationDetail$ucApplicationDetail1$"
SSS_CUSTOMER = SSS_ROOT + "tabCustomerDetail$ucCustomerDetail1$"
SSS_HOME_ADDRESS = SSS_CUSTOMER + "tabContainMain$TabPanel1$ucHomeAddress$"
SSS_PAYER = SSS_ROOT + "tabPayerDetail$"
SSS_PAYER_DETAIL = SSS_PAYER + "ucPayer1$"
SSS_HEIR = SSS_ROOT + "tabHeirDetail$"

# Duplicate check on the application tab
APP_ID_INPUT = f'input[name="{SSS_APP_DETAIL}txtAppID"]'
APP_ID_CHECK_BUTTON = f'input[name="{SSS_APP_DETAIL}btnCheckDuplicate"]'
APP_ID_ACCEPTED_TEXT = "สามารถใช้เลข App นี้ได้"
APP_ID_DUPLICATE_TEXT = "เลข App ซ้ำ"
APP_ID_MIN = 1000000
APP_ID_MAX = 9999999
# at least one probe is always made
APP_ID_MAX_ATTEMPTS = max(1, int(os.getenv("APP_ID_MAX_ATTEMPTS", "50")))

# Fixed values entered on the SSS form
SSS_VALUES = {
    'title': "1001",            # คุณ
    'birth_date': "01/01/2546",
    'zebra_car': "ZB6603000003",
    'time_period': "6901",      # ช่วงเช้า (9:00 - 12:00)
    'occupation': "1000",       # เกษตรกร
    'occupation_level': "1001",
    'marital_status': "5001",   # โสด
    'blood_type': "4001",       # A
    'sex': "1001",              # ชาย
    'weight': "60",
    'height': "168",
    'blank': "-",
    'province': "50",           # เชียงใหม่
    'amphoe': "523",            # เมืองเชียงใหม่
    'tumbol': "ช้างเผือก",
    'pay_method': "9001",       # เงินสด
    'heir_relation': "3000",    # เป็นบุคคลเดียวกันกับผู้เอาประกัน
}

# Timings (milliseconds)
STEP_DELAY_MS = 800
APP_ID_SETTLE_MS = 1000
PAYMENT_SETTLE_MS = 2000
ORDER_URL_TIMEOUT_MS = 20000

# Browser settings
BROWSER_CHANNEL = os.getenv("BROWSER_CHANNEL", "msedge")
BROWSER_PATH = os.getenv("BROWSER_PATH", "")
USER_DATA_DIR = os.getenv("USER_DATA_DIR", os.path.join(os.getcwd(), "UserData"))
CDP_PORT = int(os.getenv("CDP_PORT", "9222"))
CDP_READY_TIMEOUT = 10  # seconds
HEADLESS_MODE = False

# Output settings
OUTPUT_FOLDER = os.getenv("OUTPUT_FOLDER", "output")
SUCCESS_LOG_FILE = os.getenv("SUCCESS_LOG_FILE", "success-log.txt")
TIMEZONE = "Asia/Bangkok"
