# madrar/business_logic/data_reset_manager.py

from typing import Any, Dict, Union
import logging

from madrar.constants import Language, STORE_FUNCTION_RESET_USER_DATA
from madrar.data_access.store_functions import StoreFunctions
from madrar.errors import MadrarError
from madrar.utils.messages import translate

logger = logging.getLogger(__name__)


class DataResetManager:
    def __init__(self, store_functions: StoreFunctions):
        if store_functions is None:
            raise ValueError("store_functions cannot be None")
        self.store_functions = store_functions

    def reset_all_data(self, admin_password: str, language: Union[Language, str, None] = None) -> Dict[str, Any]:
        """
        Deletes every business record if the admin password matches. Nothing
        changes otherwise, and a store failure is reported as an unsuccessful
        result rather than raised.
        """
        logger.warning("Data reset requested.")
        try:
            result = self.store_functions.call(STORE_FUNCTION_RESET_USER_DATA, admin_password=admin_password)
        except MadrarError as e:
            logger.error(f"Data reset failed: {e}", exc_info=True)
            return {"success": False, "message": translate("reset.failed", language)}
        success = bool(result.get("success"))
        return {
            "success": success,
            "message": translate("reset.success" if success else "reset.invalid_password", language),
        }
