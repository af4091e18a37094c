from flask import current_app

from locadora import clock
from locadora.services import lifecycle
from locadora.services.obligation_service import ObligationService
from locadora.services.parsing import parse_price, parse_timestamp
from locadora.services.rental_service import RentalService
from locadora.services.store import commit


class RenewalService:
    @staticmethod
    def renew(owner_id, rental_id, new_end, new_price=None):
        """Extend a rental and raise the obligation for the new term.

        The end date is not compared with the current one. The rental update
        and the new obligation are committed together.
        """
        rental = RentalService.get_rental(owner_id, rental_id)
        new_end = parse_timestamp(new_end, "New end date")
        if new_price not in (None, ""):
            new_price = parse_price(new_price, "New price")
        else:
            new_price = None

        lifecycle.apply_renewal(rental, new_end, new_price, clock.now_ms())
        obligation_id = ObligationService.create_for_rental(rental, sequence=rental.renewal_count)
        commit()
        current_app.logger.info(
            "Rental %s renewed (renewal %s, obligation %s)", rental.id, rental.renewal_count, obligation_id
        )
        return rental, obligation_id
