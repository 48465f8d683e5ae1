"""
Service Registry: JSON-based storage for the services widgets are bound to.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

from core.models import ServiceDescriptor

logger = logging.getLogger(__name__)

DATA_DIR = Path("data")


class ServiceRegistry:
    """Manages stored ServiceDescriptors in a JSON file."""

    def __init__(self, data_dir: Path = DATA_DIR):
        self.data_dir = Path(data_dir)
        self.services_file = self.data_dir / "services.json"

        # Ensure data directory exists
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def load_services(self) -> List[ServiceDescriptor]:
        """Load all stored services from JSON file."""
        if not self.services_file.exists():
            return []
        try:
            with open(self.services_file, "r", encoding="utf-8") as f:
                data = json.load(f)
                return [ServiceDescriptor(**item) for item in data]
        except Exception as e:
            logger.error(f"Failed to load services: {e}")
            return []

    def services_for_home(self, home_name: str) -> List[ServiceDescriptor]:
        return [s for s in self.load_services() if s.home == home_name]

    def get_service(self, service_id: str) -> Optional[ServiceDescriptor]:
        for s in self.load_services():
            if s.id == service_id:
                return s
        return None

    def save_service(self, service: ServiceDescriptor) -> ServiceDescriptor:
        """Create or update a service."""
        services = self.load_services()
        for i, s in enumerate(services):
            if s.id == service.id:
                services[i] = service
                break
        else:
            services.append(service)

        self._save_services(services)
        return service

    def delete_service(self, service_id: str) -> bool:
        """
        Delete a service by ID. Widgets bound to it stay in their layouts
        and are filtered out when displayed.
        """
        services = self.load_services()
        remaining = [s for s in services if s.id != service_id]

        if len(remaining) < len(services):
            self._save_services(remaining)
            return True
        return False

    def _save_services(self, services: List[ServiceDescriptor]):
        with open(self.services_file, "w", encoding="utf-8") as f:
            json.dump([s.model_dump(mode="json") for s in services], f, indent=2, ensure_ascii=False)
