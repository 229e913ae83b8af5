from .shipengine import ShipEngineCarrier
