from typing import Optional

from fastgpt.config.config_manager import ConfigManager
from fastgpt.config.models import ClientConfig
from fastgpt.providers.base import AnswerPipeline
from fastgpt.providers.kagi_provider import KagiProvider
from fastgpt.session.session import Session
from fastgpt.utils.logging import get_logger

logger = get_logger(__name__)


class FastGPTApp:
    """
    Main application class that manages all components and their lifecycles.
    """

    def __init__(self):
        self.config_manager = ConfigManager()
        logger.debug("FastGPTApp initialized")

    def create_session(
        self,
        cache: bool = True,
        json_mode: bool = False,
        pipeline: Optional[AnswerPipeline] = None,
    ) -> Session:
        """
        Resolve configuration and start a new session.

        Raises:
            ConfigMissingError: No API key is available.
        """
        config: ClientConfig = self.config_manager.resolve(cache=cache, json_mode=json_mode)
        return Session(config, pipeline or KagiProvider(config))
