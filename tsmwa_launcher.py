import os
import sys
import webbrowser
from threading import Timer

from tsmwa_admin import create_app


def run_flask():
    """Create the Flask app and run it, opening a browser tab once it's up.

    Host and port come from TSMWA_HOST / TSMWA_PORT. The data-access handle
    is closed when the server stops.
    """
    app = create_app()

    host = os.environ.get("TSMWA_HOST", "127.0.0.1")
    try:
        port = int(os.environ.get("TSMWA_PORT", "5000"))
    except ValueError:
        port = 5000

    url = f"http://{host}:{port}/admin"

    def _open_browser():
        if not webbrowser.open(url):
            app.logger.info("Could not open a browser; visit %s", url)

    # Skip auto-open with: python tsmwa_launcher.py --no-browser
    if not any(arg in sys.argv for arg in ("--no-browser", "-nb")):
        Timer(1.5, _open_browser).start()

    try:
        app.run(host=host, port=port, debug=False, use_reloader=False)
    finally:
        app.extensions["data_access"].close()


if __name__ == "__main__":
    print("Starting TSMWA admin ...")
    print("Press CTRL+C in this window to stop it.")
    run_flask()
