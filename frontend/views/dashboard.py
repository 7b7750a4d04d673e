import html

import streamlit as st

from utils.accessibility import (
    get_accessible_badge_styles,
    get_accessible_font_size,
    get_text_color_for_background,
)
from utils.market_sentiment import (
    MARKET_HEALTH_QUERY,
    SENTIMENT_QUERY,
    use_market_health,
    use_market_sentiment,
    use_market_sentiment_fresh,
)

CONTEXT_BACKGROUNDS = {
    "EXTREME_FEAR": "bg-red-100",
    "FEAR": "bg-yellow-100",
    "NEUTRAL": "bg-gray-100",
    "GREED": "bg-green-100",
    "EXTREME_GREED": "bg-green-50",
}


def sentiment_card_html(data: dict, title: str) -> str:
    bg = CONTEXT_BACKGROUNDS.get(data["market_context"], "bg-white")
    text = get_text_color_for_background(bg)
    emoji = html.escape(str(data["emoji"]))
    classification = html.escape(str(data["classification"]))
    description = html.escape(str(data["description"]))
    return f"""
        <div class="op-card {bg} {text}">
            <div class="op-card-title">{title}</div>
            <div class="{get_accessible_font_size('2xl')}">
                {emoji} {classification} ({data['sentiment_score']}/100)
            </div>
            <div class="{get_accessible_font_size('xs')}">{description}</div>
            <span class="op-badge {get_accessible_badge_styles('default')}">
                Difficulty x{data['difficulty_multiplier']:.1f}
            </span>
        </div>
        """


def _sentiment_card(data: dict, title: str) -> None:
    st.markdown(sentiment_card_html(data, title), unsafe_allow_html=True)


@st.fragment(run_every=SENTIMENT_QUERY.refetch_interval)
def sentiment_panel():
    result = use_market_sentiment()
    if not result.is_success:
        st.warning(f"Market sentiment unavailable: {result.error}")
        return

    _sentiment_card(result.data, "Market sentiment (Fear & Greed)")
    cache = result.data.get("cache_info") or {}
    if cache.get("last_fetch"):
        st.caption(f"Last fetched {cache['last_fetch']}, cached until {cache.get('expires_at')}")


def fresh_panel():
    query = use_market_sentiment_fresh()
    if st.button("Fetch fresh reading"):
        result = query.refetch()
        if result.is_success:
            st.toast("Fresh sentiment loaded", icon="🔄")
        else:
            st.error(f"Fresh fetch failed: {result.error}")

    if query.data:
        _sentiment_card(query.data, "Fresh reading")


@st.fragment(run_every=MARKET_HEALTH_QUERY.refetch_interval)
def market_health_panel():
    result = use_market_health()
    if not result.is_success:
        st.caption(f"Market data status unknown: {result.error}")
        return

    source = result.data["services"].get("fear_greed_index", {})
    st.caption(
        f"Data source: {source.get('status', 'unknown')} | "
        f"API uptime {int(result.data['uptime'] // 60)} min"
    )


def render():
    st.title("Dashboard")
    session = st.session_state.get("session") or {}
    user = session.get("user") or {}
    st.caption(f"Signed in as {user.get('email', '')} ({user.get('role', 'FREE')})")

    col1, col2 = st.columns(2)
    with col1:
        sentiment_panel()
    with col2:
        fresh_panel()
    market_health_panel()
