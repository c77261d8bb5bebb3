"""Streamlit entry point for PREMO Intelligence.

Streamlit Cloud looks for `app.py` by default; the UI itself lives in
`streamlit_app.py`, so either `streamlit run app.py` or
`streamlit run streamlit_app.py` starts the same app.
"""

from streamlit_app import main


if __name__ == "__main__":
    main()
