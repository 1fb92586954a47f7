import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import quote, urlparse

import httpx

from app.errors import CatalogNotConfiguredError, UpstreamError
from app.schemas.exercise_catalog import CatalogExercise
from config import EXERCISEDB_API_KEY, EXERCISEDB_BASE_URL, EXERCISEDB_CACHE_MINUTES

logger = logging.getLogger(__name__)


class ExerciseCatalogService:
    """
    Read-only client for the ExerciseDB API (RapidAPI).
    Every successful answer is cached in process for cache_minutes.
    """

    def __init__(
        self,
        api_key: Optional[str] = EXERCISEDB_API_KEY,
        base_url: str = EXERCISEDB_BASE_URL,
        cache_minutes: int = EXERCISEDB_CACHE_MINUTES,
        transport: Optional[httpx.BaseTransport] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.cache_seconds = cache_minutes * 60
        self.transport = transport
        self.clock = clock
        self._cache: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()
        if not self.api_key:
            logger.warning("EXERCISEDB_API_KEY not set. Exercise catalog will not work.")

    def _headers(self) -> Dict[str, str]:
        return {
            "X-RapidAPI-Key": self.api_key,
            "X-RapidAPI-Host": urlparse(self.base_url).netloc,
        }

    def _cached(self, path: str) -> Tuple[bool, Any]:
        with self._lock:
            entry = self._cache.get(path)
            if entry is None:
                return False, None
            expires_at, value = entry
            if self.clock() >= expires_at:
                del self._cache[path]
                return False, None
            return True, value

    def _store(self, path: str, value: Any) -> None:
        with self._lock:
            self._cache[path] = (self.clock() + self.cache_seconds, value)

    def _get(self, path: str) -> Any:
        if not self.api_key:
            raise CatalogNotConfiguredError("Exercise catalog is not configured.")

        hit, value = self._cached(path)
        if hit:
            logger.debug(f"Cache hit for {path}")
            return value

        logger.info(f"Cache miss for {path}, fetching from ExerciseDB")
        try:
            with httpx.Client(base_url=self.base_url, headers=self._headers(), transport=self.transport) as client:
                response = client.get(path, timeout=10.0)
                response.raise_for_status()
                value = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Error fetching {path} from ExerciseDB: {e}")
            raise UpstreamError(f"Failed to fetch data from ExerciseDB: {e}") from e
        except ValueError as e:
            logger.error(f"Invalid JSON from ExerciseDB for {path}: {e}")
            raise UpstreamError(f"Failed to parse response from ExerciseDB: {e}") from e

        self._store(path, value)
        return value

    def _exercises(self, path: str) -> List[CatalogExercise]:
        return [CatalogExercise.model_validate(item) for item in self._get(path) or []]

    # Exercises

    def get_exercise(self, exercise_id: str) -> Optional[CatalogExercise]:
        data = self._get(f"/exercises/exercise/{quote(exercise_id, safe='')}")
        if not data:
            return None
        return CatalogExercise.model_validate(data)

    def search_by_name(self, name: str) -> List[CatalogExercise]:
        name = name.strip().lower()
        if not name:
            return []
        return self._exercises(f"/exercises/name/{quote(name, safe='')}")

    def list_by_body_part(self, body_part: str) -> List[CatalogExercise]:
        return self._exercises(f"/exercises/bodyPart/{quote(body_part, safe='')}")

    def list_by_target(self, target: str) -> List[CatalogExercise]:
        return self._exercises(f"/exercises/target/{quote(target, safe='')}")

    def list_by_equipment(self, equipment: str) -> List[CatalogExercise]:
        return self._exercises(f"/exercises/equipment/{quote(equipment, safe='')}")

    # Reference lists

    def list_body_parts(self) -> List[str]:
        return list(self._get("/exercises/bodyPartList") or [])

    def list_targets(self) -> List[str]:
        return list(self._get("/exercises/targetList") or [])

    def list_equipments(self) -> List[str]:
        return list(self._get("/exercises/equipmentList") or [])


exercise_catalog_service = ExerciseCatalogService()
