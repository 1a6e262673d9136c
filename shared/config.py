import os


RABBITMQ_USER_DEFAULT = "guest"
RABBITMQ_PASSWORD_DEFAULT = "guest"
RABBITMQ_HOST_DEFAULT = "rabbitmq"
RABBITMQ_PORT_DEFAULT = "5672"
RABBITMQ_VHOST_DEFAULT = "/"


def _build_rabbitmq_url() -> str:
    url = os.getenv("RABBITMQ_URL")
    if url:
        return url

    user = os.getenv("RABBITMQ_USER", RABBITMQ_USER_DEFAULT)
    password = os.getenv("RABBITMQ_PASSWORD", RABBITMQ_PASSWORD_DEFAULT)
    host = os.getenv("RABBITMQ_HOST", RABBITMQ_HOST_DEFAULT)
    port = os.getenv("RABBITMQ_PORT", RABBITMQ_PORT_DEFAULT)
    vhost = os.getenv("RABBITMQ_VHOST", RABBITMQ_VHOST_DEFAULT)

    if not vhost or vhost == "/":
        vhost_path = ""
    elif not vhost.startswith("/"):
        vhost_path = "/" + vhost
    else:
        vhost_path = vhost

    return f"amqp://{user}:{password}@{host}:{port}{vhost_path}"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings:
    """Service settings, read once from the environment."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "coaching_service")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8080"))

    SQLALCHEMY_DATABASE_URL: str = os.getenv("SQLALCHEMY_DATABASE_URL", "sqlite:///./coaching.db")
    CREATE_TABLES_ON_STARTUP: bool = _env_flag("CREATE_TABLES_ON_STARTUP", "true")

    CORS_ORIGINS: list[str] = os.getenv(
        "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
    ).split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    AUDIT_ENABLED: bool = _env_flag("AUDIT_ENABLED", "false")
    RABBITMQ_URL: str = _build_rabbitmq_url()


settings = Settings()
