from locadora.services.allocation_service import AllocationService
from locadora.services.auth_service import AuthService
from locadora.services.client_service import ClientService
from locadora.services.equipment_service import EquipmentService
from locadora.services.obligation_service import ObligationService
from locadora.services.renewal_service import RenewalService
from locadora.services.rental_service import RentalService

__all__ = [
    "AllocationService",
    "AuthService",
    "ClientService",
    "EquipmentService",
    "ObligationService",
    "RenewalService",
    "RentalService",
]
