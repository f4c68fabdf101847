import uvicorn

from poke_shakespeare.config import Settings


def main():
    settings = Settings()
    # The app is built by uvicorn, so importing this package has no side effects
    uvicorn.run("poke_shakespeare.main:create_app", factory=True, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
