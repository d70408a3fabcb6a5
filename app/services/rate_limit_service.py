import time

import redis
from app.utils.retry import redis_retry
from app.utils.settings import REDIS_URL
from app.utils.logging import get_logger

logger = get_logger(__name__)

#LUA incr + expire, atomicity
_HIT_LUA = """
local current = redis.call('INCR', KEYS[1])
if current == 1 then
    redis.call('EXPIRE', KEYS[1], ARGV[1])
end
return current
"""

#redis wykonuje skrypt lua atomowo, nie mozna wcisnac sie miedzy INCR a EXPIRE
#licznik jest wspolny dla wszystkich instancji api, nie w pamieci procesu


class RateLimitService:
    """
    -fixed window: jeden klucz na (klucz klienta, numer okna)
    -klucz wygasa sam po uplywie okna
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @redis_retry()
    def hit(self, key: str, limit: int, window_seconds: int) -> bool:
        window = int(time.time() // window_seconds)
        redis_key = f"ratelimit:{key}:{window}"

        current = int(self.redis.eval(_HIT_LUA, 1, redis_key, window_seconds))

        if current > limit:
            logger.warning(f"Rate limit {key}: {current}/{limit} w oknie {window_seconds}s")
            return False
        return True
