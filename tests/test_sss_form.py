"""Tests for the SSS application form steps."""

from unittest.mock import MagicMock

import pytest

from prm_order_bot import config
from prm_order_bot.data_generator import OrderRecord, is_valid_thai_id
from prm_order_bot.error_handler import SSSPageNotOpenedError
from prm_order_bot.run_params import RunParams
from prm_order_bot.sss_form import SSSApplicationForm, is_sss_page

RECORD = OrderRecord(thai_id="1101700230708", first_name="สมชาย", last_name="ใจดี", tel="0812345678")
SSS_URL = "http://uat.siamsmile.co.th:9157/Modules/PH/frmPHNewApp1.aspx?IGCode=abc"
PAYER_CARD = f'input[name="{config.SSS_PAYER_DETAIL}rdbCard"][value="rdbZCardID"]'
PAYER_ID_FIELD = f'input[name="{config.SSS_PAYER_DETAIL}ucZCardIDPayer$txtCardID"]'


def make_form(url=SSS_URL):
    page = MagicMock()
    page.url = url
    return SSSApplicationForm(page, MagicMock(), step_delay_ms=0)


def filled(page):
    return {c.args[0]: c.args[1] for c in page.fill.call_args_list}


def test_is_sss_page():
    page = MagicMock(url=SSS_URL)
    assert is_sss_page(page)
    page.url = config.MANAGEMENT_PAGE_URL
    assert not is_sss_page(page)


def test_wait_until_loaded_rejects_other_pages():
    form = make_form(url="about:blank")
    with pytest.raises(SSSPageNotOpenedError):
        form.wait_until_loaded()


def test_application_detail_uses_app_id_and_dcr_period():
    form = make_form()
    params = RunParams("7", "2569", RECORD.tel, 1, config.PAYER_SELF)

    form.fill_application_detail("3456789", params, RECORD)

    assert filled(form.page)[config.APP_ID_INPUT] == "3456789"
    form.page.select_option.assert_any_call(
        f'select[name="{config.SSS_APP_DETAIL}ucMonthYearPeriod$ddlMonth"]', "7"
    )
    form.page.select_option.assert_any_call(
        f'select[name="{config.SSS_APP_DETAIL}ucMonthYearPeriod$ddlYear"]', "2569"
    )


def test_payer_self_skips_payer_identity():
    form = make_form()
    params = RunParams("7", "2569", RECORD.tel, 1, config.PAYER_SELF)

    form.fill_payer_detail(params, RECORD)

    checked = [c.args[0] for c in form.page.check.call_args_list]
    assert PAYER_CARD not in checked
    assert PAYER_ID_FIELD not in filled(form.page)


def test_other_payer_gets_synthetic_identity():
    form = make_form()
    params = RunParams("7", "2569", RECORD.tel, 1, config.PAYER_OTHER)

    form.fill_payer_detail(params, RECORD)

    form.page.check.assert_any_call(PAYER_CARD)
    payer_id = filled(form.page)[PAYER_ID_FIELD]
    assert is_valid_thai_id(payer_id)
    assert filled(form.page)[f'input[name="{config.SSS_PAYER_DETAIL}txtPhoneNumber"]'] == RECORD.tel


def test_pdpa_checks_only_unchecked_boxes():
    form = make_form()
    pdpa_page = form.context.expect_page.return_value.__enter__.return_value.value
    ticked, unticked = MagicMock(), MagicMock()
    ticked.is_checked.return_value = True
    unticked.is_checked.return_value = False
    pdpa_page.locator.return_value.all.return_value = [ticked, unticked]

    form.accept_pdpa()

    ticked.check.assert_not_called()
    unticked.check.assert_called_once()
    pdpa_page.click.assert_any_call("button#btn_save")
    pdpa_page.close.assert_called_once()
