"""
Review Insight - Web Server Entry Point
=======================================

Run this to start the API:
    python main.py

Then POST to http://127.0.0.1:8000/api/analyze.

To analyze a list of places from a spreadsheet:
    python run_batch.py places.xlsx --user-id owner-1
"""

import uvicorn


def main():
    """Start the web server."""
    print("\n" + "=" * 50)
    print("   Review Insight - API Server")
    print("=" * 50)
    print("\n   Starting server at http://127.0.0.1:8000")
    print("   Press Ctrl+C to stop\n")

    uvicorn.run(
        "review_insight.web.app:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
        log_level="info"
    )


if __name__ == "__main__":
    main()
