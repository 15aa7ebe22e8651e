"""
Streamlit Frontend for Finanzas

The daily screen for recording income and expenses and seeing where
the money goes.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Explicit confirmation before anything destructive
3. Clear error messages in simple language
4. Every figure comes from the orchestrator, never computed here

Destructive actions (deleting a movement, restoring a backup) need a
second click on a confirmation button.
"""

from datetime import date, datetime, time
from decimal import Decimal

import streamlit as st

from finanzas.config import validate_all_settings
from finanzas.models import (
    CATEGORY_ORDER,
    Category,
    Transaction,
    TransactionType,
    category_label,
)
from finanzas.orchestrator import AppComponents, create_app_components
from finanzas.services.backup import ImportFormatError
from finanzas.services.storage import NotFoundError, PersistenceError
from finanzas.validation import TransactionValidator, ValidationError


# Page configuration
st.set_page_config(
    page_title="Finanzas",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .income {
        color: #28a745;
        font-weight: bold;
    }
    .expense {
        color: #dc3545;
        font-weight: bold;
    }
</style>
""", unsafe_allow_html=True)


TYPE_LABELS = {
    TransactionType.INCOME: "Ingreso",
    TransactionType.EXPENSE: "Gasto",
}

RANGE_OPTIONS = {
    "week": "Última semana",
    "month": "Este mes",
    "year": "Este año",
    "all": "Todo",
    "custom": "Personalizado",
}

_validator = TransactionValidator()


def format_currency(amount) -> str:
    """Colombian peso format, no decimals: ``$ 1.250.000``."""
    value = Decimal(amount).quantize(Decimal(1))
    sign = "-" if value < 0 else ""
    return f"{sign}$ {abs(value):,.0f}".replace(",", ".")


@st.cache_resource
def get_components() -> AppComponents:
    """Get or create application components (cached)."""
    return create_app_components()


def main():
    """Main application entry point."""
    components = get_components()

    st.sidebar.title("💰 Finanzas")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Ir a:",
        ["🏠 Inicio", "📊 Estadísticas", "📅 Reporte mensual", "💾 Copia de seguridad", "⚙️ Configuración"],
        index=0,
    )

    if page == "🏠 Inicio":
        render_home_page(components)
    elif page == "📊 Estadísticas":
        render_stats_page(components)
    elif page == "📅 Reporte mensual":
        render_report_page(components)
    elif page == "💾 Copia de seguridad":
        render_backup_page(components)
    elif page == "⚙️ Configuración":
        render_settings_page(components)


def render_home_page(components: AppComponents):
    """Summary cards, suggestions and the current month's movements."""
    view = components.dashboard.current_month()

    st.title(f"🏠 {view.month.label.capitalize()}")

    col1, col2, col3 = st.columns(3)
    col1.metric("Ingresos", format_currency(view.totals.income))
    col2.metric("Gastos", format_currency(view.totals.expense))
    col3.metric("Balance", format_currency(view.balance))

    suggestions = components.dashboard.suggestions()
    if suggestions:
        with st.expander("💡 Sugerencias", expanded=False):
            for suggestion in suggestions:
                st.markdown(f"**{suggestion.title}**")
                st.write(suggestion.message)

    st.markdown("---")
    render_add_form(components)

    st.markdown("---")
    st.markdown("### Movimientos del mes")
    if view.is_empty:
        st.info("📋 Aún no hay movimientos este mes.")
        return

    for transaction in view.transactions:
        render_transaction_row(components, transaction)


def _combine_date(day: date, current: datetime) -> datetime:
    """Keep the time of day of ``current`` when only the date is picked."""
    return datetime.combine(day, current.timetz() if current.tzinfo else time(12, 0))


def render_add_form(components: AppComponents):
    """Form for a new movement."""
    with st.form("add_transaction", clear_on_submit=True):
        st.markdown("### ➕ Nuevo movimiento")
        col1, col2 = st.columns(2)
        with col1:
            kind = st.radio(
                "Tipo",
                options=list(TransactionType),
                format_func=lambda t: TYPE_LABELS[t],
                horizontal=True,
            )
            amount = st.text_input("Monto", placeholder="50000")
        with col2:
            category = st.selectbox(
                "Categoría",
                options=CATEGORY_ORDER,
                index=CATEGORY_ORDER.index(Category.OTHER),
                format_func=category_label,
            )
            description = st.text_input("Descripción")

        if st.form_submit_button("💾 Guardar", type="primary"):
            try:
                components.mutations.add(
                    type=kind,
                    amount=amount,
                    description=description,
                    category=category,
                )
                st.success("✅ Movimiento guardado")
                st.rerun()
            except ValidationError as e:
                st.error(_validator.get_user_friendly_summary(e))
            except PersistenceError as e:
                st.warning(f"Guardado en esta sesión, pero no en disco: {e}")


def render_transaction_row(components: AppComponents, transaction: Transaction):
    """One movement with inline edit and delete."""
    css = "income" if transaction.is_income else "expense"
    sign = "+" if transaction.is_income else "-"
    local_day = transaction.local_date(components.queries.tz)

    col1, col2, col3, col4 = st.columns([4, 2, 1, 1])
    col1.markdown(
        f"**{transaction.description or category_label(transaction.category)}**  \n"
        f"{category_label(transaction.category)} · {local_day.strftime('%d/%m/%Y')}"
    )
    col2.markdown(
        f'<span class="{css}">{sign}{format_currency(transaction.amount)}</span>',
        unsafe_allow_html=True,
    )

    edit_key = f"edit_{transaction.id}"
    delete_key = f"delete_{transaction.id}"

    if col3.button("✏️", key=f"btn_{edit_key}"):
        st.session_state[edit_key] = not st.session_state.get(edit_key, False)
    if col4.button("🗑️", key=f"btn_{delete_key}"):
        st.session_state[delete_key] = True

    if st.session_state.get(delete_key):
        st.warning("¿Eliminar este movimiento?")
        yes, no = st.columns(2)
        if yes.button("Sí, eliminar", key=f"confirm_{delete_key}"):
            st.session_state[delete_key] = False
            try:
                components.mutations.remove(transaction.id)
            except PersistenceError as e:
                st.warning(f"Eliminado en esta sesión, pero no en disco: {e}")
            st.rerun()
        if no.button("Cancelar", key=f"cancel_{delete_key}"):
            st.session_state[delete_key] = False
            st.rerun()

    if st.session_state.get(edit_key):
        render_edit_form(components, transaction, edit_key)


def render_edit_form(components: AppComponents, transaction: Transaction, edit_key: str):
    with st.form(f"form_{edit_key}"):
        kind = st.radio(
            "Tipo",
            options=list(TransactionType),
            index=list(TransactionType).index(transaction.type),
            format_func=lambda t: TYPE_LABELS[t],
            horizontal=True,
        )
        amount = st.text_input("Monto", value=str(transaction.amount))
        category = st.selectbox(
            "Categoría",
            options=CATEGORY_ORDER,
            index=CATEGORY_ORDER.index(transaction.category),
            format_func=category_label,
        )
        description = st.text_input("Descripción", value=transaction.description)
        day = st.date_input("Fecha", value=transaction.local_date(components.queries.tz))

        if st.form_submit_button("💾 Guardar cambios"):
            try:
                components.mutations.update(
                    transaction.id,
                    type=kind,
                    amount=amount,
                    category=category,
                    description=description,
                    date=_combine_date(day, transaction.date),
                )
                st.session_state[edit_key] = False
                st.rerun()
            except ValidationError as e:
                st.error(_validator.get_user_friendly_summary(e))
            except NotFoundError:
                st.error("Este movimiento ya no existe.")
            except PersistenceError as e:
                st.warning(f"Actualizado en esta sesión, pero no en disco: {e}")


def render_stats_page(components: AppComponents):
    """Expense breakdown for a chosen range."""
    st.title("📊 Estadísticas")

    choice = st.selectbox(
        "Periodo",
        options=list(RANGE_OPTIONS),
        index=1,
        format_func=lambda k: RANGE_OPTIONS[k],
    )

    range_spec = choice
    if choice == "custom":
        today = components.today()
        col1, col2 = st.columns(2)
        start = col1.date_input("Desde", value=today.replace(day=1))
        end = col2.date_input("Hasta", value=today)
        if start > end:
            st.error("La fecha inicial debe ser anterior a la final.")
            return
        range_spec = {"start": start, "end": end}

    summary = components.dashboard.period_stats(range_spec)

    col1, col2, col3 = st.columns(3)
    col1.metric("Ingresos", format_currency(summary.income))
    col2.metric("Gastos", format_currency(summary.expense))
    col3.metric("Balance", format_currency(summary.balance))

    if not summary.sorted_breakdown:
        st.info("No hay gastos en este periodo.")
        return

    st.markdown("### Gastos por categoría")
    st.bar_chart(
        {"Monto": {category_label(cat): float(amount) for cat, amount in summary.sorted_breakdown}}
    )
    for cat, amount in summary.sorted_breakdown:
        st.markdown(f"- **{category_label(cat)}**: {format_currency(amount)}")


def render_report_page(components: AppComponents):
    """Report for a completed month."""
    st.title("📅 Reporte mensual")

    choice = components.reports.report_choice()
    if not choice.has_history:
        st.info("📭 Sin Historial: aún no hay meses anteriores con movimientos.")
        return

    report = choice.report
    if choice.needs_selection:
        selected = st.selectbox(
            "Mes",
            options=choice.months,
            format_func=lambda m: m.label.capitalize(),
        )
        report = components.reports.report(selected.year, selected.month)

    st.markdown(f"## {report.month.label.capitalize()}")
    col1, col2, col3 = st.columns(3)
    col1.metric("Ingresos", format_currency(report.totals.income))
    col2.metric("Gastos", format_currency(report.totals.expense))
    col3.metric("Balance", format_currency(report.balance))

    st.markdown(f"**Mayor gasto:** {report.top_category_label}")
    st.info(report.advice_message)


def render_backup_page(components: AppComponents):
    """Download and restore backups."""
    st.title("💾 Copia de seguridad")

    st.markdown("### Descargar")
    filename, text = components.backups.export(components.today())
    st.download_button(
        "⬇️ Descargar copia",
        data=text.encode("utf-8"),
        file_name=filename,
        mime="application/json",
    )

    st.markdown("---")
    st.markdown("### Restaurar")
    st.warning("Restaurar reemplaza TODOS los movimientos actuales.")
    uploaded = st.file_uploader("Archivo de copia (.json)", type=["json"])

    if uploaded is not None and st.button("♻️ Restaurar copia", type="primary"):
        st.session_state.pending_restore = uploaded.getvalue()

    pending = st.session_state.get("pending_restore")
    if pending is None:
        return

    st.error("¿Seguro? Esta acción no se puede deshacer.")
    yes, no = st.columns(2)
    if yes.button("Sí, restaurar"):
        st.session_state.pending_restore = None
        try:
            count = components.backups.restore(pending)
            st.success(f"✅ {count} movimientos restaurados")
        except ImportFormatError as e:
            st.error(f"Archivo inválido: {e}")
        except PersistenceError as e:
            st.warning(f"Restaurado en esta sesión, pero no en disco: {e}")
    if no.button("Cancelar"):
        st.session_state.pending_restore = None
        st.rerun()


def render_settings_page(components: AppComponents):
    """Render the settings page."""
    st.title("⚙️ Configuración")

    status = validate_all_settings()

    sections = [
        ("Almacenamiento", "storage"),
        ("Copias de seguridad", "backup"),
        ("Aplicación", "app"),
    ]

    for name, key in sections:
        if status.get(key, False):
            st.success(f"✅ {name}")
        else:
            error = status.get(f"{key}_error", "Sin configurar")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown(
        "La configuración se lee de variables de entorno o de un archivo `.env` "
        "(prefijos `FINANZAS_STORAGE_` y `FINANZAS_BACKUP_`)."
    )

    st.markdown("---")
    with st.expander("🕑 Actividad reciente"):
        events = components.audit_logger.recent_events(limit=20)
        if not events:
            st.write("Sin actividad en esta sesión.")
        for event in events:
            st.markdown(f"`{event.timestamp:%H:%M:%S}` {event.description}")


if __name__ == "__main__":
    main()
