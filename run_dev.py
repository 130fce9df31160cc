# run_dev.py
import os
import socket

from dotenv import load_dotenv

# Carga .env si existe (DATABASE_URL, SECRET_KEY, ...)
if os.path.exists(".env"):
    load_dotenv(".env")


def _lan_ip() -> str:
    """IP LAN para probar desde el celular (mobile) sin depender de DNS."""
    try:
        s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        s.connect(("8.8.8.8", 80))
        ip = s.getsockname()[0]
        s.close()
        return ip
    except OSError:
        return "127.0.0.1"


def _flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip() in ("1", "true", "True", "yes", "on")


def main():
    import uvicorn

    from app.core.config import settings

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    reload_flag = _flag("RELOAD", True)

    print(f"🔗 API local: http://127.0.0.1:{port}")
    print(f"📱 API LAN:   http://{_lan_ip()}:{port}")
    print(f"💬 WS:        ws://127.0.0.1:{port}/ws/?token=...")
    print(f"🌀 reload={'ON' if reload_flag else 'OFF'}")

    # ⚠️ workers=1: el pub/sub del chat vive en memoria de este proceso
    uvicorn.run(
        "app.main:app",
        host=host,
        port=port,
        ws="websockets",
        reload=reload_flag,
        reload_dirs=["app"],
        timeout_keep_alive=30,
        timeout_graceful_shutdown=15,
        log_level=settings.LOG_LEVEL.lower(),
        lifespan="on",
    )


if __name__ == "__main__":
    main()
