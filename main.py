# main.py

from subprocess import run
from sys import executable

from smartops.configs import get_settings


def start(cmmd: list[str]) -> None:
    run(cmmd, check=True)


def main() -> None:
    settings = get_settings()
    cmmd = [
        executable,
        "-m",
        "uvicorn",
        "smartops.main:create_app",
        "--factory",
        "--host",
        settings.SERVER_HOST,
        "--port",
        str(settings.SERVER_PORT),
        "--log-level",
        settings.LOG_LEVEL.lower(),
    ]
    if settings.ENVIRONMENT == "development":
        cmmd.append("--reload")
    start(cmmd)


if __name__ == "__main__":
    main()
