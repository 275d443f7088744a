"""
Heart Failure Dashboard
Outcome, risk and data quality views over the heart_failure table
"""
import streamlit as st
import pandas as pd
import plotly.express as px
from pathlib import Path
from heart_failure.core.config import RECORDS_LOGS
from heart_failure.core.db import get_engine
from heart_failure.services import analysis

st.set_page_config(page_title="Heart Failure Dashboard", layout="wide")

# Database connection
@st.cache_resource
def get_connection():
    try:
        return get_engine()
    except Exception as e:
        st.error(f"Cannot connect to database: {e}")
        return None

@st.cache_data(ttl=60)
def load_query(_engine, name):
    with _engine.connect() as conn:
        return getattr(analysis, name)(conn)

@st.cache_data(ttl=60)
def load_log(filepath):
    if Path(filepath).exists():
        return pd.read_csv(filepath)
    return pd.DataFrame()

# Main app
st.title("Heart Failure Clinical Records")
st.markdown("Outcomes, risk groups and rejected source rows")
st.markdown("---")

engine = get_connection()
if not engine:
    st.stop()

totals = load_query(engine, "filtered_totals")
averages = load_query(engine, "age_and_ejection_summary")
rejects = load_log(RECORDS_LOGS)

# Summary metrics
st.subheader("Summary")
col1, col2, col3, col4 = st.columns(4)

col1.metric("Patients", totals["total_patients"])
col2.metric("Deaths", totals["total_deaths"])
col3.metric("Diabetics", totals["diabetics"])
col4.metric("Rejected rows", len(rejects))

if averages["avg_age"] is not None:
    st.caption(
        f"Average age: {averages['avg_age']:.1f} years | "
        f"Average ejection fraction: {averages['avg_ejection_fraction']:.1f}%"
    )

st.markdown("---")
col1, col2 = st.columns(2)

with col1:
    st.markdown("**Deaths by smoking status**")
    smoking = load_query(engine, "smoking_death_rate")
    if not smoking.empty:
        smoking["smoking"] = smoking["smoking"].map({0: "Non-smoker", 1: "Smoker"})
        fig = px.bar(
            smoking,
            x="smoking",
            y=["total_patients", "deaths"],
            barmode="group",
            labels={"smoking": "Smoking", "value": "Patients"},
        )
        fig.update_layout(height=300)
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.info("No records loaded")

with col2:
    st.markdown("**Risk categories**")
    risk = load_query(engine, "risk_categories")
    if not risk.empty:
        counts = risk["risk_category"].value_counts()
        fig = px.pie(values=counts.values, names=counts.index, hole=0.4)
        fig.update_traces(textposition="inside", textinfo="percent+label")
        fig.update_layout(height=300)
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.info("No records loaded")

st.markdown("---")
st.subheader("Data Quality")

if not rejects.empty:
    st.warning(f"{len(rejects)} source rows were rejected")
    st.dataframe(rejects, use_container_width=True, height=300)
else:
    st.success("No rejected rows.")

st.markdown("---")
st.subheader("Data Explorer")

option = st.selectbox("Select listing", ["Critical patients", "Long follow-up", "Normal sodium"])
queries = {
    "Critical patients": "critical_patient_rows",
    "Long follow-up": "long_follow_up",
    "Normal sodium": "normal_sodium",
}
rows = load_query(engine, queries[option])
st.markdown(f"**{len(rows)} records**")
st.dataframe(rows, use_container_width=True, height=400)
