"""Lead intake gateway: validates website form submissions and relays them to the CRM."""

__version__ = "1.0.0"
