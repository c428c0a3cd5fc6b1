import streamlit as st
import subprocess
import sys
import os
import io
import zipfile
import pandas as pd
import base64
import uuid
import hashlib
from datetime import datetime

from zoning import MERGE_THRESHOLD, SPLIT_THRESHOLD

st.set_page_config(page_title="DJ-MD5 Zone Converter", page_icon="📻", layout="wide")

# Function to generate a unique session ID for each user
def get_session_id():
    # Check if session_id exists in session state
    if 'session_id' not in st.session_state:
        # Generate a unique session ID based on timestamp and random UUID
        unique_id = f"{datetime.now().timestamp()}_{uuid.uuid4()}"
        # Hash the ID to make it shorter but still unique
        hashed_id = hashlib.md5(unique_id.encode()).hexdigest()
        st.session_state.session_id = hashed_id

    return st.session_state.session_id


def save_upload(uploaded_file, upload_dir, filename):
    """Store an uploaded export in the user's upload directory and return its path"""
    if not os.path.exists(upload_dir):
        os.makedirs(upload_dir)
    path = os.path.join(upload_dir, filename)
    with open(path, "wb") as f:
        f.write(uploaded_file.getbuffer())
    return path


def cleanup_uploads(upload_dir):
    if os.path.exists(upload_dir):
        for file in os.listdir(upload_dir):
            file_path = os.path.join(upload_dir, file)
            try:
                if os.path.isfile(file_path):
                    os.unlink(file_path)
            except OSError as e:
                st.warning(f"Error deleting {file_path}: {e}")


# Get or create a unique session ID for the current user
session_id = get_session_id()
user_output_dir = f"output_{session_id}"
user_uploads_dir = f"uploads_{session_id}"

st.title("DJ-MD5 Zone Converter")
st.markdown("Convert Contact Manager contacts and channels exports to DJ-MD5 CPS import files")

col1, col2 = st.columns(2)

with col1:
    st.subheader("Contacts")
    contacts_upload = st.file_uploader("Contact Manager contacts export", type="csv", key="contacts_upload")

    st.subheader("Channels")
    channels_upload = st.file_uploader("Contact Manager channels export", type="csv", key="channels_upload")
    export_groups = st.checkbox("Export talkgroups", value=True,
                                help="Write talkgroups.csv with one entry per talkgroup ID used by the channels")

with col2:
    st.subheader("Zones")
    merge_threshold = st.number_input("Merge Threshold", min_value=0, value=MERGE_THRESHOLD,
                                      help="The two smallest zones are merged while they hold fewer channels "
                                           "than this together")
    split_threshold = st.number_input("Split Threshold", min_value=1, value=SPLIT_THRESHOLD,
                                      help="Zones with more channels than this are split in two")

if st.button("Convert", key="convert"):
    if contacts_upload is None and channels_upload is None:
        st.error("Please upload a contacts or a channels export")
    elif merge_threshold > split_threshold:
        st.error("Merge threshold must not be larger than split threshold")
    else:
        cmd = [sys.executable, "zone.py", "-o", user_output_dir]

        if contacts_upload is not None:
            contacts_path = save_upload(contacts_upload, user_uploads_dir, "contacts.csv")
            cmd.extend(["-c", contacts_path, "-C", "contacts.csv"])

        if channels_upload is not None:
            channels_path = save_upload(channels_upload, user_uploads_dir, "channels.csv")
            cmd.extend(["-f", channels_path, "-F", "channels.csv", "-Z", "zones.csv"])
            if export_groups:
                cmd.extend(["-G", "talkgroups.csv"])
            cmd.extend(["--merge-threshold", str(int(merge_threshold)),
                        "--split-threshold", str(int(split_threshold))])

        # Show command
        st.code(" ".join(cmd), language="bash")

        with st.spinner("Converting..."):
            process = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True
            )
            output, error = process.communicate()

        cleanup_uploads(user_uploads_dir)

        if process.returncode == 0:
            st.success("Files converted successfully!")
            st.code(output)

            csv_files = sorted(f for f in os.listdir(user_output_dir) if f.endswith('.csv'))

            if csv_files:
                st.subheader("Download Generated Files")

                zip_buffer = io.BytesIO()
                with zipfile.ZipFile(zip_buffer, 'w', zipfile.ZIP_DEFLATED) as zip_file:
                    for csv_file in csv_files:
                        zip_file.write(os.path.join(user_output_dir, csv_file), csv_file)

                st.download_button(
                    label="📦 Download All Files as ZIP",
                    data=zip_buffer.getvalue(),
                    file_name=f"djmd5_files_{session_id[:8]}.zip",
                    mime="application/zip",
                    key="download_zip"
                )

                st.markdown("---")
                st.markdown("Or download individual files:")

                for csv_file in csv_files:
                    file_path = os.path.join(user_output_dir, csv_file)

                    st.subheader(f"{csv_file}")
                    try:
                        df = pd.read_csv(file_path, dtype=str, keep_default_na=False)
                        st.dataframe(df)
                    except (pd.errors.ParserError, UnicodeDecodeError):
                        st.warning(f"Could not display {csv_file} as a table")

                    with open(file_path, "r", newline='') as file:
                        file_content = file.read()

                    b64 = base64.b64encode(file_content.encode()).decode()
                    href = f'<a href="data:text/csv;base64,{b64}" download="{csv_file}">Download {csv_file}</a>'
                    st.markdown(href, unsafe_allow_html=True)
        else:
            st.error("Error converting files")
            st.code(error)

# Help section
st.sidebar.header("Help")

st.sidebar.markdown("""
## How to use
1. Export contacts and/or channels from Contact Manager as CSV
2. Upload the exports
3. Adjust the zone thresholds if your radio needs fewer or smaller zones
4. Click Convert
5. Download the generated files and import them in the DJ-MD5 CPS
""")

st.sidebar.markdown("""
## CSV Files Generated
- **contacts.csv**: Digital contact list
- **channels.csv**: Channel configuration data
- **talkgroups.csv**: One talkgroup per ID found in the channels
- **zones.csv**: Channels grouped into zones by talkgroup
""")

st.sidebar.header("Session Info")
st.sidebar.text(f"Session: {session_id[:8]}")
