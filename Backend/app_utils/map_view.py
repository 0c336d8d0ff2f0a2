from typing import Dict, List, Optional

from app_utils.constants import DEFAULT_LAT, DEFAULT_LON, FOCUS_SPAN, MARKER_COLOR


class MapView:
    """
    Marker payload for the client map.

    Owned by whoever builds it; call destroy() when done so the
    pothole -> marker index is released.
    """

    def __init__(self, center_lat: float = DEFAULT_LAT, center_lon: float = DEFAULT_LON):
        self.center = {"latitude": center_lat, "longitude": center_lon}
        self._markers: Dict[str, dict] = {}
        self.focus: Optional[dict] = None
        self.destroyed = False

    def add_pothole(self, pothole) -> dict:
        if self.destroyed:
            raise RuntimeError("MapView has been destroyed")
        marker = {
            "pothole_id": pothole.id,
            "title": pothole.name,
            "latitude": pothole.latitude,
            "longitude": pothole.longitude,
            "upvote_count": pothole.upvote_count or 0,
            "color": MARKER_COLOR,
        }
        self._markers[pothole.id] = marker
        return marker

    def focus_on(self, pothole_id: str) -> Optional[dict]:
        """Region centred on a pothole's marker, or None if it is not on this map."""
        marker = self._markers.get(pothole_id)
        if marker is None:
            return None
        self.focus = {
            "pothole_id": pothole_id,
            "center": {"latitude": marker["latitude"], "longitude": marker["longitude"]},
            "span": {"latitude_delta": FOCUS_SPAN, "longitude_delta": FOCUS_SPAN},
        }
        return self.focus

    @property
    def markers(self) -> List[dict]:
        return list(self._markers.values())

    def to_dict(self) -> dict:
        return {
            "center": self.center,
            "markers": self.markers,
            "focus": self.focus,
        }

    def destroy(self):
        self._markers.clear()
        self.focus = None
        self.destroyed = True
