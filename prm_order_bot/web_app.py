import sys
from pathlib import Path

import altair as alt
import streamlit as st

from prm_order_bot import config
from prm_order_bot.data_handler import SuccessLog
from prm_order_bot.main import AutomationApp, LAUNCH, CONNECT
from prm_order_bot.run_params import default_params, normalize_params


BROWSER_MODES = {
    LAUNCH: "เปิดเบราว์เซอร์ใหม่ (โปรไฟล์ UserData)",
    CONNECT: f"เชื่อมต่อเบราว์เซอร์ที่เปิดอยู่ (พอร์ต {config.CDP_PORT})",
}


def render_form() -> None:
    defaults = default_params()
    months = [str(m) for m in range(1, 13)]

    with st.form("run_params"):
        month = st.selectbox("เดือน DCR", options=months, index=months.index(defaults.dcr_month))
        year = st.text_input("ปี DCR (พ.ศ.)", value=defaults.dcr_year)
        tel = st.text_input("เบอร์โทรศัพท์", value=defaults.tel)
        run_times = st.number_input("จำนวนรอบ", min_value=1, value=1, step=1)
        payer = st.selectbox(
            "ความสัมพันธ์ผู้ชำระเงิน",
            options=list(config.PAYER_RELATIONS.keys()),
            format_func=lambda code: f"{code} - {config.PAYER_RELATIONS[code]}",
        )
        browser_mode = st.radio(
            "เบราว์เซอร์",
            options=list(BROWSER_MODES.keys()),
            format_func=BROWSER_MODES.get,
        )
        submitted = st.form_submit_button("เริ่มทำงาน", type="primary")

    if submitted:
        st.session_state.run_params = normalize_params(month, year, tel, int(run_times), payer)
        st.session_state.browser_mode = browser_mode
        st.rerun()


def render_run() -> None:
    """Runs once per submission; the form is not shown again until the page is reset"""
    params = st.session_state.run_params
    st.success("ค่าถูกส่งแล้ว! ปิดหน้านี้ได้เลย")
    st.json(params.__dict__)

    if "exit_code" not in st.session_state:
        app = AutomationApp(params, browser_mode=st.session_state.browser_mode)
        with st.spinner(f"กำลังทำงาน {params.run_times} รอบ..."):
            st.session_state.exit_code = app.run()
        st.session_state.completed = app.completed

    if st.session_state.exit_code == 0:
        st.success(f"เสร็จสิ้นทั้งหมด {st.session_state.completed} ครั้ง")
    else:
        st.error(
            f"หยุดทำงานหลังสำเร็จ {st.session_state.completed} ครั้ง "
            f"(exit code {st.session_state.exit_code}) ดู log ที่ {config.OUTPUT_FOLDER}/error_log.txt"
        )

    if st.button("เริ่มรอบใหม่"):
        for key in ("run_params", "browser_mode", "exit_code", "completed"):
            st.session_state.pop(key, None)
        st.rerun()


def render_history() -> None:
    df = SuccessLog(config.SUCCESS_LOG_FILE).load_history()
    if df.empty:
        st.info(f"ยังไม่มีรายการใน {config.SUCCESS_LOG_FILE}")
        return

    st.metric("Applications created", len(df))

    per_day = (
        df.dropna(subset=["run_at"])
        .assign(day=lambda d: d["run_at"].dt.normalize())
        .groupby("day", as_index=False)
        .size()
        .rename(columns={"size": "count"})
    )
    chart = (
        alt.Chart(per_day)
        .mark_bar()
        .encode(
            x=alt.X("day:T", title="Day"),
            y=alt.Y("count:Q", title="Applications"),
            tooltip=[alt.Tooltip("day:T"), alt.Tooltip("count:Q")],
        )
    )
    st.altair_chart(chart, use_container_width=True)

    table = df.rename(columns={
        "timestamp": "เวลา",
        "full_name": "ชื่อ",
        "thai_id": "เลขบัตรประชาชน",
        "app_id": "App ID",
    }).drop(columns=["run_at"])
    st.dataframe(table.iloc[::-1], use_container_width=True, hide_index=True)


def main() -> None:
    st.set_page_config(page_title="PRM Order Bot", layout="centered")
    st.title("PRM Order / SSS Application Bot")

    run_tab, history_tab = st.tabs(["Run", "History"])
    with run_tab:
        if "run_params" in st.session_state:
            render_run()
        else:
            render_form()
    with history_tab:
        render_history()


def launch() -> None:
    """Console entry point: `streamlit run` this file"""
    from streamlit.web import cli as stcli

    sys.argv = ["streamlit", "run", str(Path(__file__).resolve())]
    sys.exit(stcli.main())


if __name__ == "__main__":
    main()
