# run_dev.py
"""
Local development launcher for the relay.
Equivalent to: `uvicorn persona_relay.app:app --reload --host 0.0.0.0 --port 8000`
"""

import uvicorn

from persona_relay.settings import settings

if __name__ == "__main__":
    uvicorn.run(
        "persona_relay.app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
