"""
Concrete quantum-number families.

- Sz              : z-component of the total spin, unbounded (stored as 2*Sz so it stays integral),
- ParticleNumber  : total particle number N, unbounded,
- SpinfulParticle : (N, Sz), both unbounded,
- Momentum1/2/3   : crystal momenta of 1D/2D/3D periodic lattices, the component
                    k_i lives in Z_{N_i} for a lattice with N_i unit cells along i.

---------------------------------------------------
File        : QAN/Numbers/concrete.py
Description : Predefined quantum-number descriptors
Author      : Maksymilian Kliczkowski
Date        : 2025-11-07
---------------------------------------------------
"""

from    functools   import lru_cache
from    typing      import Optional

from    QAN.Numbers.base import INF, QuantumNumberSpec

####################################################################################################
#! U(1) families
####################################################################################################

Sz              = QuantumNumberSpec("Sz",               ("Sz",),        (INF,))
ParticleNumber  = QuantumNumberSpec("ParticleNumber",   ("N",),         (INF,))
SpinfulParticle = QuantumNumberSpec("SpinfulParticle",  ("N", "Sz"),    (INF, INF))

####################################################################################################
#! Momenta
####################################################################################################

@lru_cache(maxsize=None)
def Momentum1(n1: int) -> QuantumNumberSpec:
    """
    1D crystal momentum ``k`` in units of ``2*pi/n1``.
    """
    return QuantumNumberSpec("Momentum1", ("k1",), (n1,))

@lru_cache(maxsize=None)
def Momentum2(n1: int, n2: Optional[int] = None) -> QuantumNumberSpec:
    """
    2D crystal momentum ``(k1, k2)``; ``n2`` defaults to ``n1``.
    """
    n2 = n1 if n2 is None else n2
    return QuantumNumberSpec("Momentum2", ("k1", "k2"), (n1, n2))

@lru_cache(maxsize=None)
def Momentum3(n1: int, n2: Optional[int] = None, n3: Optional[int] = None) -> QuantumNumberSpec:
    """
    3D crystal momentum ``(k1, k2, k3)``; missing extents repeat ``n1``.
    """
    n2 = n1 if n2 is None else n2
    n3 = n1 if n3 is None else n3
    return QuantumNumberSpec("Momentum3", ("k1", "k2", "k3"), (n1, n2, n3))

####################################################################################################

__all__ = [
    'Sz',
    'ParticleNumber',
    'SpinfulParticle',
    'Momentum1',
    'Momentum2',
    'Momentum3',
]
