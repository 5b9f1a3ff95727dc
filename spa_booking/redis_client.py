# spa_booking/redis_client.py

from redis import Redis

from .config import settings

# Connection is opened lazily on the first command
redis_client: Redis = Redis.from_url(settings.redis_url, decode_responses=True)
