#main.py
"""
Main entry point for the Signal Generator Remote.
Parses the command line, initializes the GUI and starts the application.
"""

import argparse            # Parses the command line options
import sys                 # Handles Python runtime settings and exceptions
import tkinter as tk       # Tkinter for GUI creation
from tkinter import messagebox  # Dialog popups
import logging             # Application logging
from pathlib import Path    # Cross-platform path handling

from GUI.main_app import SignalGeneratorApplication, on_closing
from siggen_communication.config import (
    ClientSettings, setup_logging, DEFAULT_BASE_URL, DEFAULT_BAUDRATE, DEFAULT_REQUEST_TIMEOUT_MS
)


def setup_exception_handling(root, logger):
    """
    Configures global exception handler to log errors and show user-friendly messages.
    root: The main Tkinter root window.
    logger: The Logger instance to record errors.
    """

    def show_error(msg):
        messagebox.showerror("Error", f"An error occurred: {msg}\n\nCheck the log for details.")

    def handle_exception(exc_type, exc_value, exc_traceback):
        # A KeyboardInterrupt just quits
        if issubclass(exc_type, KeyboardInterrupt):
            root.quit()
            return

        logger.error("Uncaught exception:", exc_info=(exc_type, exc_value, exc_traceback))
        root.after(100, lambda: show_error(str(exc_value)))

    sys.excepthook = handle_exception
    # Tk swallows callback exceptions unless routed here
    root.report_callback_exception = handle_exception


def create_app_directories():
    """
    Creates necessary application directories if they don't exist.
    Returns a tuple of (app_dir, log_dir).
    """
    app_dir = Path.home() / ".siggen_remote"
    log_dir = app_dir / "logs"

    for directory in [app_dir, log_dir]:
        directory.mkdir(parents=True, exist_ok=True)

    return app_dir, log_dir


def parse_args(argv=None):
    """
    Reads the command line options.
    """
    parser = argparse.ArgumentParser(description="Remote control for the ESP32 signal generator")
    parser.add_argument("--host", default=DEFAULT_BASE_URL,
                        help=f"Device address (default: {DEFAULT_BASE_URL})")
    parser.add_argument("--console", action="store_true",
                        help="Open the console-only page instead of the full control page")
    parser.add_argument("--serial", metavar="PORT",
                        help="Talk to the device console over a serial port (implies --console)")
    parser.add_argument("--baudrate", type=int, default=DEFAULT_BAUDRATE,
                        help=f"Serial baud rate (default: {DEFAULT_BAUDRATE})")
    parser.add_argument("--simulate", action="store_true",
                        help="Use the built-in device simulator")
    parser.add_argument("--timeout", type=int, default=DEFAULT_REQUEST_TIMEOUT_MS,
                        help=f"Milliseconds to wait for a reply (default: {DEFAULT_REQUEST_TIMEOUT_MS})")
    parser.add_argument("--debug", action="store_true", help="Show debug messages")
    return parser.parse_args(argv)


def build_settings(args):
    """
    Turns parsed options into client settings.

    Raises:
        ValueError: If the options don't make a valid configuration.
    """
    return ClientSettings(
        base_url=args.host,
        profile="console" if (args.console or args.serial) else "full",
        request_timeout_ms=args.timeout,
        serial_port=args.serial,
        baudrate=args.baudrate,
        simulate=args.simulate,
    )


def main(argv=None):
    """
    Main function to start the Signal Generator Remote.
    Creates directories, sets up logging, and starts the Tkinter GUI.
    """
    args = parse_args(argv)
    app_dir, log_dir = create_app_directories()

    logger = setup_logging("SignalGeneratorRemote", log_dir)
    logger.setLevel(logging.DEBUG if args.debug else logging.INFO)
    logger.info("Starting Signal Generator Remote")

    try:
        settings = build_settings(args)
    except ValueError as e:
        logger.error(f"Invalid options: {e}")
        sys.exit(2)

    root = tk.Tk()
    setup_exception_handling(root, logger)

    try:
        app = SignalGeneratorApplication(root, settings, logger)
        root.protocol("WM_DELETE_WINDOW", lambda: on_closing(root, app))
        logger.info("Application initialized successfully")

        # Centers the window on screen
        window_width, window_height = settings.profile_params["window"]
        screen_width = root.winfo_screenwidth()
        screen_height = root.winfo_screenheight()
        center_x = int((screen_width - window_width) / 2)
        center_y = int((screen_height - window_height) / 2)
        root.geometry(f"{window_width}x{window_height}+{center_x}+{center_y}")

        root.mainloop()

    except Exception as e:
        logger.error(f"Failed to start application: {str(e)}", exc_info=True)
        messagebox.showerror(
            "Startup Error",
            f"Failed to start application: {str(e)}\n\nCheck the log for details."
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
