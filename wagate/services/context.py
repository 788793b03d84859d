"""Gateway context, the one object that owns all process-wide state.

Built once in the app lifespan and hung off ``app.state.gateway``; route
handlers receive it through ``wagate.api.dependencies``.
"""

from dataclasses import dataclass

from wagate.core.scheduler import TaskScheduler
from wagate.services.connection import ConnectionManager
from wagate.services.credentials import CredentialStore
from wagate.services.groups import GroupCache
from wagate.services.notifications import NotificationChannel
from wagate.whatsapp.base import SessionFactory
from wagate.whatsapp.baileys import BaileysClient, BaileysSessionFactory


@dataclass
class GatewayContext:
    factory: SessionFactory
    credentials: CredentialStore
    groups: GroupCache
    notifications: NotificationChannel
    connection: ConnectionManager
    scheduler: TaskScheduler
    webhook_api_key: str = ""
    app_name: str = "WhatsApp Gateway"

    def load(self) -> None:
        """Synchronous startup work: session directory and group snapshot."""
        self.credentials.ensure()
        self.groups.load()

    async def start(self) -> None:
        self.load()
        self.connection.start()

    async def stop(self) -> None:
        await self.connection.close()


def build_context(
    factory: SessionFactory,
    session_dir: str,
    groups_file: str,
    scheduler: TaskScheduler | None = None,
    refresh_delay_after_connect: float = 2.0,
    refresh_delay_after_group_change: float = 1.0,
    sidecar_retry_delay: float = 5.0,
    webhook_api_key: str = "",
    app_name: str = "WhatsApp Gateway",
) -> GatewayContext:
    scheduler = scheduler or TaskScheduler()
    credentials = CredentialStore(session_dir)
    notifications = NotificationChannel()
    connection = ConnectionManager(
        factory,
        credentials,
        notifications,
        scheduler,
        refresh_delay_after_connect=refresh_delay_after_connect,
        refresh_delay_after_group_change=refresh_delay_after_group_change,
        sidecar_retry_delay=sidecar_retry_delay,
    )
    groups = GroupCache(groups_file, connection.connected_session)
    connection.refresh_groups = groups.refresh

    return GatewayContext(
        factory=factory,
        credentials=credentials,
        groups=groups,
        notifications=notifications,
        connection=connection,
        scheduler=scheduler,
        webhook_api_key=webhook_api_key,
        app_name=app_name,
    )


def context_from_settings(settings) -> GatewayContext:
    client = BaileysClient(
        base_url=settings.BAILEYS_SERVICE_URL,
        api_key=settings.BAILEYS_API_KEY,
        timeout=settings.REQUEST_TIMEOUT,
    )
    factory = BaileysSessionFactory(
        client,
        session_id=settings.SESSION_ID,
        webhook_url=settings.WEBHOOK_URL,
        browser=settings.BROWSER,
    )
    return build_context(
        factory,
        session_dir=settings.SESSION_DIR,
        groups_file=settings.GROUPS_FILE,
        refresh_delay_after_connect=settings.REFRESH_DELAY_AFTER_CONNECT,
        refresh_delay_after_group_change=settings.REFRESH_DELAY_AFTER_GROUP_CHANGE,
        sidecar_retry_delay=settings.SIDECAR_RETRY_DELAY,
        webhook_api_key=settings.BAILEYS_API_KEY,
        app_name=settings.APP_NAME,
    )
