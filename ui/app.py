"""
NeckCoach Streamlit UI - Live posture dashboard over the status bus.
Reads storage/status.json written by dev_runner.py.
"""
import streamlit as st
from pathlib import Path
import pandas as pd
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from neckcoach import EstimatorConfig, AccountingConfig, EventLogger, read_status, format_duration
from ui.config_manager import ConfigManager
from streamlit_autorefresh import st_autorefresh

# Page config
st.set_page_config(page_title="NeckCoach", page_icon="🦒", layout="wide")

# CSS
st.markdown("""
<style>
.status-good { color: #28a745; font-weight: bold; }
.status-issue { color: #dc3545; font-weight: bold; }
.status-paused { color: #6c757d; font-weight: bold; }
.waiting-banner {
    background-color: #fff3cd;
    border: 1px solid #ffc107;
    color: #856404;
    padding: 1rem;
    border-radius: 0.5rem;
    margin: 1rem 0;
}
</style>
""", unsafe_allow_html=True)

# Auto-refresh every 1 second
st_autorefresh(interval=1000, key="datarefresh")

# Initialize session state
if 'config_manager' not in st.session_state:
    st.session_state.config_manager = ConfigManager()
if 'event_logger' not in st.session_state:
    st.session_state.event_logger = EventLogger()

st.title("🦒 NeckCoach")
st.caption("Neck posture tracking from head motion")

status, error = read_status()

# Status Section
st.header("📊 Live Status")

if error:
    st.markdown(f"""
    <div class="waiting-banner">
        <strong>⏳ Waiting for a running session...</strong><br>
        Reason: {error}<br>
        <br>
        To start a session, run in a terminal:<br>
        <code>python dev_runner.py</code>
    </div>
    """, unsafe_allow_html=True)
else:
    current = status['current_status']

    if not status['is_connected']:
        st.markdown('<p class="status-paused">● DISCONNECTED - Connect the sensor</p>', unsafe_allow_html=True)
    elif not status['is_tracking']:
        st.markdown('<p class="status-paused">⏸ NOT MONITORING</p>', unsafe_allow_html=True)
    elif status['is_calibrating']:
        st.markdown('<p class="status-paused">📏 CALIBRATING - Hold a neutral posture</p>', unsafe_allow_html=True)
        st.progress(status['calibration_progress_percent'] / 100.0,
                    text=f"Calibrating: {status['calibration_progress_percent']}%")
    elif current['direction'] == 'Neutral':
        st.markdown(f'<p class="status-good">● {status["position_label"].upper()}</p>', unsafe_allow_html=True)
    else:
        st.markdown(f'<p class="status-issue">⚠ {status["position_label"].upper()}</p>', unsafe_allow_html=True)

    col1, col2, col3, col4 = st.columns(4)

    with col1:
        st.metric("Neck Angle", f"{status['current_neck_angle']:.1f}°")

    with col2:
        st.metric("Yaw", f"{current['yaw_deviation']:.1f}°")

    with col3:
        st.metric("Current Good Streak", format_duration(status['current_good_time']))

    with col4:
        st.metric("Current Bad Streak", format_duration(status['current_bad_time']))

    # Session totals
    st.subheader("Session Totals")
    stats = status['stats']
    col1, col2, col3 = st.columns(3)
    col1.metric("Good Posture", format_duration(stats['good_posture_time']))
    col2.metric("Poor Posture", format_duration(stats['bad_posture_time']))
    col3.metric("Good %", f"{stats['good_posture_percentage']:.0f}%")

    if status['hourly']:
        df = pd.DataFrame(status['hourly'])
        df['Good (min)'] = df['good_time'] / 60.0
        df['Poor (min)'] = df['bad_time'] / 60.0
        st.bar_chart(df.set_index('hour')[['Good (min)', 'Poor (min)']])

    baseline = status['baseline']
    if baseline:
        with st.expander("📏 Calibration Baseline"):
            col1, col2, col3 = st.columns(3)
            col1.metric("Pitch", f"{baseline['pitch_baseline']:.1f}°")
            col2.metric("Yaw", f"{baseline['yaw_baseline']:.1f}°")
            col3.metric("Samples", baseline['sample_count'])

st.divider()

# Thresholds Section
st.header("🎯 Thresholds")
config = st.session_state.config_manager.load_config()
estimator = config['estimator_config']
col1, col2, col3 = st.columns(3)
neutral = col1.slider("Neutral band (°)", 1.0, 10.0, float(estimator['neutral_threshold_deg']), 0.5)
lateral = col2.slider("Lateral (°)", 5.0, 45.0, float(estimator['lateral_threshold_deg']), 1.0)
window = col3.slider("Smoothing window", 1, 20, int(estimator['smoothing_window']))

if st.button("💾 Save Thresholds"):
    estimator['neutral_threshold_deg'] = neutral
    estimator['lateral_threshold_deg'] = lateral
    estimator['smoothing_window'] = window
    st.session_state.config_manager.save_config(
        EstimatorConfig.from_dict(estimator),
        AccountingConfig.from_dict(config['accounting_config']),
        config['system_config']
    )
    st.success("✅ Saved! Restart dev_runner to apply.")

st.divider()

# Data Section
st.header("🗑️ Data")

def set_confirm_purge(value: bool):
    st.session_state.confirm_purge = value
    st.session_state.purged = False


def purge_all_data():
    st.session_state.event_logger.purge_logs()
    st.session_state.config_manager.purge_config()
    st.session_state.confirm_purge = False
    st.session_state.purged = True


st.button("🗑️ Purge All Data", on_click=set_confirm_purge, args=(True,))

if st.session_state.get('confirm_purge'):
    st.warning("This deletes the event log and saved settings.")
    col1, col2 = st.columns(2)
    col1.button("✅ Confirm Purge", on_click=purge_all_data)
    col2.button("Cancel", on_click=set_confirm_purge, args=(False,))

if st.session_state.get('purged'):
    st.success("✅ Purged!")

st.divider()

# Event Log
st.header("📋 Event Log")
events = st.session_state.event_logger.get_recent_events(100)
changes = [e for e in events if e['event_type'] == 'status_changed']
st.metric("Posture Changes", len(changes))

if events:
    df = pd.DataFrame(events)
    df['details'] = df['payload'].apply(
        lambda p: ", ".join(f"{k}={v}" for k, v in p.items() if v is not None)
    )
    st.dataframe(df[['timestamp', 'event_type', 'details']].tail(20), use_container_width=True)
else:
    st.info("No events yet")

st.caption("NeckCoach v1 - Neck posture tracking")
