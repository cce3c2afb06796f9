import sys
from pathlib import Path
import copy
import pytest

# Añadir la raíz del proyecto al PYTHONPATH
sys.path.insert(0, str(Path(__file__).parent))

from sitesurvey.catalog.catalog import InMemoryCatalog
from sitesurvey.core.building import Building

SAMPLE_DOCUMENT = {
    "buildings": [
        {
            "id": "b1",
            "name": "HQ",
            "centralRack": {
                "id": "cr1",
                "name": "Main Rack",
                "switches": [
                    {
                        "id": "sw-core",
                        "name": "Core",
                        "brand": "Cisco",
                        "ip": "10.0.0.1",
                        "products": [{"productId": "P-SW", "quantity": 1}],
                        "services": [{"id": "sa-1", "serviceId": "S-INSTALL", "quantity": 1}],
                    }
                ],
            },
            "floors": [
                {
                    "id": "f1",
                    "name": "Ground",
                    "level": 1,
                    "racks": [
                        {
                            "id": "r1",
                            "name": "IDF-1",
                            "cableTerminations": [
                                {
                                    "id": "ct1",
                                    "cableType": "CAT6",
                                    "quantity": 24,
                                    "products": [{"productId": "P-CAT6", "quantity": 24}],
                                }
                            ],
                        }
                    ],
                    "rooms": [
                        {
                            "id": "room-lobby",
                            "name": "Lobby",
                            "devices": [
                                {
                                    "id": "d1",
                                    "type": "AP",
                                    "brand": "Ubiquiti",
                                    "ip": "10.0.1.5",
                                    "products": [{"productId": "P-AP", "quantity": 1}],
                                }
                            ],
                            "outlets": [
                                {
                                    "id": "o1",
                                    "label": "Wall-1",
                                    "type": "DATA",
                                    "connection": {
                                        "id": "oc1",
                                        "fromDevice": "SW1-P1",
                                        "toDevice": "o1",
                                    },
                                    "products": [{"productId": "P-JACK", "quantity": 2}],
                                }
                            ],
                        }
                    ],
                },
                {
                    "id": "f2",
                    "name": "Guest Floor",
                    "level": 2,
                    "isTypical": True,
                    "repeatCount": 2,
                    "rooms": [
                        {
                            "id": "room-guest",
                            "name": "Guest Room",
                            "isTypical": True,
                            "repeatCount": 3,
                            "devices": [
                                # formato antiguo de asignación
                                {"id": "d2", "type": "TV", "productId": "P-AP"}
                            ],
                        }
                    ],
                },
            ],
        }
    ],
    "productPricing": {
        "P-AP": {"unitPrice": 100, "marginPercent": 20},
        "P-CAT6": {"unitPrice": 2},
    },
    "servicePricing": {
        "S-INSTALL": {"unitPrice": 50, "marginPercent": 50},
    },
}


@pytest.fixture
def sample_document():
    """Documento de levantamiento serializado (camelCase)"""
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture
def sample_buildings(sample_document):
    return [Building.model_validate(b) for b in sample_document["buildings"]]


@pytest.fixture
def catalog():
    return InMemoryCatalog(
        products={
            "P-SW": {"name": "Catalyst 9300", "brand": "Cisco", "category": "Switching"},
            "P-AP": {"name": "UniFi AP", "brand": "Ubiquiti"},
        },
        services={
            "S-INSTALL": {"name": "Installation", "category": "Labor"},
        },
    )
