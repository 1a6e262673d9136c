import asyncio
import json
import logging
import uuid
from datetime import datetime, timezone

import aio_pika

from shared.config import settings

logger = logging.getLogger(__name__)

AUDIT_EXCHANGE = "events_exchange"
AUDIT_TASK_NAME = "process_audit_log"

# Keeps fire-and-forget publish tasks referenced until they finish.
_pending_tasks: set = set()


def generate_log_payload(
    event_type: str,
    entity_type: str,
    entity_id,
    operation_type: str,
    request_object=None,
    old_data: dict | None = None,
    new_data: dict | None = None,
    service_origin: str | None = None,
) -> dict:
    """
    Build a structured audit record with old_data and new_data as plain,
    JSON-ready Python values.
    """
    ip = request_object.client.host if request_object and request_object.client else "127.0.0.1"

    correlation_id = None
    if request_object is not None:
        correlation_id = request_object.headers.get("X-Request-ID")

    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "correlation_id": correlation_id or str(uuid.uuid4()),
        "service_origin": service_origin or settings.SERVICE_NAME,
        "event_type": event_type,
        "operation_type": operation_type,
        "entity_type": entity_type,
        "entity_id": str(entity_id),
        "old_data": convert_values(old_data),
        "new_data": convert_values(new_data),
        "ip_address": ip,
    }


def build_audit_message(log_payload: dict) -> aio_pika.Message:
    # Celery wire format: (args, kwargs, embed)
    celery_body = (
        [log_payload],
        {},
        {"callbacks": None, "errbacks": None, "chain": None, "chord": None},
    )

    task_id = str(uuid.uuid4())
    celery_headers = {
        'lang': 'py',
        'task': AUDIT_TASK_NAME,
        'id': task_id,
        'root_id': task_id,
        'parent_id': None,
        'group': None,
    }

    return aio_pika.Message(
        body=json.dumps(celery_body).encode('utf-8'),
        headers=celery_headers,
        content_type='application/json',
        content_encoding='utf-8',
        delivery_mode=aio_pika.DeliveryMode.PERSISTENT
    )


async def publish_audit_log(log_payload: dict):
    """Publish one audit record to the topic exchange, keyed by its event type."""
    try:
        connection = await aio_pika.connect_robust(settings.RABBITMQ_URL)

        async with connection:
            channel = await connection.channel()

            exchange = await channel.declare_exchange(
                AUDIT_EXCHANGE,
                aio_pika.ExchangeType.TOPIC,
                durable=True
            )

            routing_key = log_payload["event_type"]
            await exchange.publish(build_audit_message(log_payload), routing_key=routing_key)

            logger.info("Audit log sent to '%s' with routing key '%s'", AUDIT_EXCHANGE, routing_key)

    except aio_pika.exceptions.AMQPConnectionError as e:
        logger.error("RabbitMQ connection error while publishing audit log: %s", e)
    except Exception:
        logger.exception("Failed to publish audit log")


def model_to_dict(model_instance):
    if not model_instance:
        return {}
    return {c.name: getattr(model_instance, c.name) for c in model_instance.__table__.columns}


def convert_values(obj):
    if isinstance(obj, dict):
        return {k: convert_values(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [convert_values(i) for i in obj]
    elif isinstance(obj, uuid.UUID):
        return str(obj)
    elif isinstance(obj, datetime):
        return obj.isoformat()
    else:
        return obj


def run_async_audit(log_payload: dict) -> bool:
    """Schedule publication without waiting for it. Returns False when auditing is off."""
    if not settings.AUDIT_ENABLED:
        return False
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.error("No running event loop; audit log for %s dropped", log_payload.get("event_type"))
        return False
    task = loop.create_task(publish_audit_log(log_payload))
    _pending_tasks.add(task)
    task.add_done_callback(_pending_tasks.discard)
    return True
