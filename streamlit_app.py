"""
NILO - Streamlit Frontend

Chat interface for the payroll and billing assistant.
Connects to the FastAPI backend for processing; chats live only in the
browser session.

Run with: streamlit run streamlit_app.py
"""
import os
import uuid

import pandas as pd
import requests
import streamlit as st

# ============================================================
# Configuration
# ============================================================

API_BASE_URL = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")

MODES = {
    "SQL": "sql",
    "Conversación": "chat",
    "Reglas": "rules",
}

st.set_page_config(
    page_title="NILO",
    page_icon="💬",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    html, body, [class*="css"], .stMarkdown, p {
        font-family: 'Inter', sans-serif;
    }
    .main .block-container {
        padding-top: 2rem;
        padding-bottom: 3rem;
        max-width: 1000px;
    }
    .stChatMessage {
        padding: 1rem;
        margin-bottom: 0.75rem;
        border-radius: 12px;
    }
</style>
""", unsafe_allow_html=True)


# ============================================================
# Session State
# ============================================================

def new_chat(title: str = "Nuevo chat") -> str:
    """Create an empty chat and make it the active one."""
    chat_id = uuid.uuid4().hex[:8]
    st.session_state.chats[chat_id] = {"title": title, "messages": []}
    st.session_state.active_chat = chat_id
    return chat_id


def init_session_state():
    """Initialize session state variables."""
    if "chats" not in st.session_state:
        st.session_state.chats = {}
    if "active_chat" not in st.session_state or st.session_state.active_chat not in st.session_state.chats:
        new_chat()
    if "backend_connected" not in st.session_state:
        st.session_state.backend_connected = False


def check_backend() -> bool:
    """Check if backend is available."""
    try:
        response = requests.get(f"{API_BASE_URL}/health", timeout=10)
        st.session_state.backend_connected = response.status_code == 200
    except requests.exceptions.RequestException:
        st.session_state.backend_connected = False
    return st.session_state.backend_connected


# ============================================================
# API Functions
# ============================================================

def send_message(prompt: str, mode: str) -> dict:
    """
    Send a question to the backend.

    Returns a dict with "content" and, for SQL answers, "query".
    """
    try:
        if mode == "rules":
            response = requests.post(
                f"{API_BASE_URL}/api/assistant",
                json={"question": prompt},
                timeout=60
            )
            if response.status_code == 200:
                return {"content": response.json().get("answer", "")}
        else:
            response = requests.post(
                f"{API_BASE_URL}/api/chat",
                json={"prompt": prompt, "mode": mode},
                timeout=120
            )
            if response.status_code == 200:
                data = response.json()
                return {"content": data.get("result", ""), "query": data.get("query")}

        return {"content": f"❌ Error del servidor ({response.status_code})"}
    except requests.exceptions.Timeout:
        return {"content": "❌ La solicitud tardó demasiado. Intenta una pregunta más sencilla."}
    except requests.exceptions.ConnectionError:
        return {"content": "❌ No hay conexión con el servidor."}


def run_query(query: str) -> dict:
    """Run a raw SELECT through the backend."""
    try:
        response = requests.post(f"{API_BASE_URL}/api/query", json={"query": query}, timeout=60)
        data = response.json()
        if response.status_code == 200:
            return data
        return {"error": data.get("error") or data.get("message", "Consulta rechazada")}
    except requests.exceptions.RequestException as e:
        return {"error": str(e)}


# ============================================================
# UI Components
# ============================================================

def render_sidebar() -> str:
    """Render chat management and the mode selector. Returns the API mode."""
    with st.sidebar:
        st.title("💬 NILO")
        st.markdown("*Asistente de nómina y facturación*")

        if st.session_state.backend_connected:
            st.success("🟢 Servidor en línea")
        else:
            st.error("🔴 Servidor fuera de línea")
            if st.button("🔄 Reconectar", use_container_width=True):
                if check_backend():
                    st.rerun()

        st.divider()

        label = st.radio("Modo", list(MODES.keys()), horizontal=True)

        st.divider()
        st.subheader("Chats")

        if st.button("➕ Nuevo chat", use_container_width=True):
            new_chat()
            st.rerun()

        for chat_id, chat in list(st.session_state.chats.items()):
            is_current = chat_id == st.session_state.active_chat
            col_name, col_delete = st.columns([0.8, 0.2])
            with col_name:
                title = chat["title"]
                if len(title) > 28:
                    title = title[:25] + "..."
                if st.button(f"{'🟢' if is_current else '📄'} {title}", key=f"select_{chat_id}",
                             use_container_width=True):
                    st.session_state.active_chat = chat_id
                    st.rerun()
            with col_delete:
                if st.button("🗑️", key=f"delete_{chat_id}", help="Eliminar chat"):
                    del st.session_state.chats[chat_id]
                    if not st.session_state.chats:
                        new_chat()
                    elif is_current:
                        st.session_state.active_chat = next(iter(st.session_state.chats))
                    st.rerun()

        with st.expander("✏️ Renombrar chat actual"):
            current = st.session_state.chats[st.session_state.active_chat]
            new_title = st.text_input("Nombre", value=current["title"], key=f"rename_{st.session_state.active_chat}")
            if st.button("Guardar", use_container_width=True) and new_title.strip():
                current["title"] = new_title.strip()
                st.rerun()

    return MODES[label]


def render_message(msg: dict):
    with st.chat_message(msg["role"]):
        st.markdown(msg["content"])
        if msg.get("query"):
            with st.expander("📄 SQL generado"):
                st.code(msg["query"], language="sql")


def render_chat(mode: str):
    """Render the active chat and handle new input."""
    chat = st.session_state.chats[st.session_state.active_chat]
    st.markdown(f"## {chat['title']}")

    for msg in chat["messages"]:
        render_message(msg)

    if prompt := st.chat_input("Pregúntale a NILO sobre nómina o facturación..."):
        user_msg = {"role": "user", "content": prompt}
        chat["messages"].append(user_msg)
        render_message(user_msg)

        # First question names an untitled chat
        if chat["title"] == "Nuevo chat":
            chat["title"] = prompt[:40]

        with st.spinner("Pensando..."):
            reply = send_message(prompt, mode)

        assistant_msg = {"role": "assistant", **reply}
        chat["messages"].append(assistant_msg)
        render_message(assistant_msg)


def render_query_console():
    """Raw SELECT console with a downloadable result."""
    with st.expander("🗃️ Consulta directa"):
        query = st.text_area("SELECT", placeholder="SELECT full_name, status FROM employees;")
        if st.button("Ejecutar") and query.strip():
            with st.spinner("Consultando..."):
                result = run_query(query)
            if "error" in result:
                st.error(f"❌ {result['error']}")
            elif result.get("data"):
                df = pd.DataFrame(result["data"])
                st.caption(f"{result.get('row_count', len(df))} filas")
                st.dataframe(df, use_container_width=True)
                st.download_button(
                    "📥 Descargar CSV",
                    df.to_csv(index=False).encode("utf-8"),
                    "consulta.csv",
                    "text/csv",
                )
            else:
                st.info("No se encontraron resultados.")


# ============================================================
# Main App
# ============================================================

def main():
    """Main application entry point."""
    init_session_state()

    if not st.session_state.backend_connected:
        check_backend()

    mode = render_sidebar()

    if not st.session_state.backend_connected:
        st.warning("⚠️ No hay conexión con el backend. Inicia el servidor:")
        st.code("uvicorn nilo.api.main:app --reload --port 8000", language="bash")
        return

    render_query_console()
    render_chat(mode)


if __name__ == "__main__":
    main()
