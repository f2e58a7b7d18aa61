"""Fuentes de CEP (adaptadores concretos).

Por qué un paquete:
- Agrupa un módulo por servicio externo.
- Cada módulo implementa `core.interfaces.source.AddressSource`.
"""

from adapters.cep_sources.base import JsonAddressSource
from adapters.cep_sources.brasilapi import BrasilAPISource
from adapters.cep_sources.viacep import ViaCEPSource

__all__ = [
	"BrasilAPISource",
	"JsonAddressSource",
	"ViaCEPSource",
]
