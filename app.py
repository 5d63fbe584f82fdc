import asyncio
from pyodide.ffi import create_proxy
from pyscript import document, window

from config import API_URL, MSG_LOADING, STAGE_BUTTON_IDS, STAGE_LEXICAL, STAGES
from errors import AnalyzerError
from session import AnalysisSession
import views

# ==========================================
# BLOCK 1. GLOBAL CONFIG & ENVIRONMENT
# ==========================================

def _resolve_api_url() -> str:
    """The page may point the client elsewhere by defining window.ANALYZER_API_URL."""
    override = getattr(window, "ANALYZER_API_URL", None)
    if override:
        print(f"LOG: Using endpoint override {override}")
        return str(override)
    return API_URL

SESSION = AnalysisSession(api_url=_resolve_api_url())

# JS keeps references to these; Python must too or they get collected
_PROXIES = []

def _proxy(fn):
    proxy = create_proxy(fn)
    _PROXIES.append(proxy)
    return proxy

# ===============================================
# BLOCK 2. RENDERERS (THE VIEW)
# ===============================================

def _set_html(element_id: str, markup: str):
    el = document.getElementById(element_id)
    if el:
        el.innerHTML = markup

def render_loading(active: bool):
    """Spinner + submit button lock while a request is in flight."""
    loading = document.getElementById("loading")
    if loading:
        loading.style.display = "flex" if active else "none"
        loading.innerText = MSG_LOADING
    submit_btn = document.getElementById(STAGE_BUTTON_IDS[STAGE_LEXICAL])
    if submit_btn:
        submit_btn.disabled = active

def render_stage_controls():
    for control in SESSION.stage_controls:
        btn = document.getElementById(control["id"])
        if not btn:
            continue
        # The lexical button doubles as the submit control
        if control["stage"] == STAGE_LEXICAL:
            btn.disabled = SESSION.is_submitting
        else:
            btn.disabled = not control["enabled"]
        btn.classList.toggle("active", control["active"])

def render_notice():
    _set_html("notice-area", views.render_notice(SESSION.last_error))
    # The dismiss button is recreated with every notice
    dismiss_btn = document.getElementById("notice-dismiss")
    if dismiss_btn:
        dismiss_btn.addEventListener("click", DISMISS_PROXY)

def render_results():
    result = SESSION.result
    results_el = document.getElementById("results")
    if results_el:
        results_el.style.display = "" if SESSION.has_result else "none"

    if not SESSION.has_result:
        for element_id in ("stats-section", "errors-panel", "tokens-panel", "category-panel"):
            _set_html(element_id, "")
        return

    _set_html("stats-section", views.render_stats_cards(result["stats"]))
    _set_html("errors-panel", views.render_errors_panel(result, SESSION.active_stage))
    _set_html("tokens-panel", views.render_tokens_panel(result))
    _set_html("category-panel", views.render_category_panel(result))

def render_all():
    render_stage_controls()
    render_notice()
    render_results()

# ===============================================
# BLOCK 3. INTERACTION & EVENTS (THE BRIDGE)
# ===============================================

def on_source_input(event=None):
    """Every edit invalidates the displayed analysis."""
    code_el = document.getElementById("code-input")
    if not code_el:
        return
    SESSION.set_source(code_el.value)
    render_all()

async def on_analyze_click(event=None):
    if SESSION.is_submitting:
        return
    render_loading(True)
    submission = asyncio.ensure_future(SESSION.submit())
    # One tick lets submit() clear the previous analysis; stale panels go while pending
    await asyncio.sleep(0)
    render_all()
    try:
        await submission
    except AnalyzerError as e:
        # Already stored on the session; render_notice shows it
        print(f"Error: {e}")
    finally:
        render_loading(False)
        render_all()

def _make_stage_handler(stage: str):
    def on_stage_click(event=None):
        SESSION.select_stage(stage)
        render_all()
    return on_stage_click

def on_dismiss_notice(event=None):
    SESSION.dismiss_error()
    render_notice()

DISMISS_PROXY = _proxy(on_dismiss_notice)

# ===============================================
# BLOCK 4. INITIALIZATION (BOOTLOADER)
# ===============================================

async def main():
    """Main entry point: seeds the editor, then hooks the controls."""

    # --- Seed the editor with the session's sample program ---
    code_el = document.getElementById("code-input")
    if code_el:
        code_el.value = SESSION.source
        code_el.addEventListener("input", _proxy(on_source_input))

    # --- Hook the submit button ---
    submit_btn = document.getElementById(STAGE_BUTTON_IDS[STAGE_LEXICAL])
    if submit_btn:
        submit_btn.addEventListener("click", _proxy(on_analyze_click))

    # --- Hook the gated stage buttons ---
    for stage in STAGES[1:]:
        btn = document.getElementById(STAGE_BUTTON_IDS[stage])
        if btn:
            btn.addEventListener("click", _proxy(_make_stage_handler(stage)))

    render_loading(False)
    render_all()
    print("Java analyzer is ready.")

# Start the main asynchronous task
asyncio.ensure_future(main())
