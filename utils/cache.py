"""
Cache em memória com expiração (TTL)
Instanciado e injetado por quem usa; não existe instância global.
"""
import time
from typing import Any, Callable, Dict, Optional

from config import CACHE_TTL_SECONDS
from utils.logger import get_logger

logger = get_logger(__name__)


class TTLCache:
    """Armazena valores por chave até o tempo de vida expirar"""

    def __init__(
        self,
        default_ttl: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Args:
            default_ttl: Tempo de vida padrão em segundos
            clock: Fonte de tempo (injetável para testes)
        """
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, Dict[str, Any]] = {}

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        self._entries[key] = {
            'value': value,
            'stored_at': self._clock(),
            'ttl': self.default_ttl if ttl is None else ttl
        }

    def _is_expired(self, entry: Dict[str, Any], now: float) -> bool:
        return now - entry['stored_at'] > entry['ttl']

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return default
        if self._is_expired(entry, self._clock()):
            del self._entries[key]
            return default
        return entry['value']

    def has(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def expire(self, key: str) -> bool:
        """Invalida uma chave; retorna True se ela existia"""
        return self._entries.pop(key, None) is not None

    delete = expire

    def clear(self) -> None:
        self._entries.clear()

    def cleanup(self) -> int:
        """Remove entradas vencidas e retorna quantas foram removidas"""
        now = self._clock()
        expired = [k for k, e in self._entries.items() if self._is_expired(e, now)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(f"Cache: {len(expired)} entrada(s) expirada(s) removida(s)")
        return len(expired)

    def get_stats(self) -> Dict[str, Any]:
        return {
            'size': len(self._entries),
            'keys': list(self._entries.keys())
        }


_MISSING = object()
