"""Game status and registry registration service."""

from typing import Optional

from racerboard.config import Config, is_address
from racerboard.datasources import ChainClient
from racerboard.errors import ConfigurationError
from racerboard.models import (
    GameMeta,
    GameRegisterRequest,
    GameRegisterResponse,
    GameRegistrationStatus,
    GameStatusResponse,
)
from .validation import require_contract


class GameService:
    """Service reporting and managing this game's entry in the registry contract."""

    def __init__(self, chain: ChainClient, config: Config):
        self.chain = chain
        self.config = config

    def _require_signer(self) -> str:
        signer = self.chain.signer_address
        if not is_address(signer):
            raise ConfigurationError("server signer missing")
        return signer

    async def get_status(self) -> GameStatusResponse:
        """Report signer/contract readiness and the chain head."""
        signer = self.chain.signer_address
        contract = self.config.contract_address
        ok_signer = is_address(signer)
        ok_contract = is_address(contract)

        latest = await self.chain.get_block_number()

        return GameStatusResponse(
            signer=signer if ok_signer else None,
            contract=contract if ok_contract else None,
            latestBlock=latest,
            ready=ok_signer and ok_contract,
        )

    async def get_registration(self) -> GameRegistrationStatus:
        """Read the registry entry for the server signer's game."""
        contract = require_contract(self.config.contract_address)
        game = self._require_signer()

        addr, image, name, url = await self.chain.read_contract(contract, "games", [game])
        registered = bool(addr) and str(addr).lower() == game.lower()

        return GameRegistrationStatus(
            registered=registered,
            game=game,
            meta=GameMeta(name=name, image=image, url=url),
        )

    async def register(self, body: Optional[GameRegisterRequest] = None) -> GameRegisterResponse:
        """Register the server signer as a game, defaulting metadata from config."""
        contract = require_contract(self.config.contract_address)
        game = self._require_signer()
        body = body or GameRegisterRequest()

        name = body.name if body.name is not None else self.config.game_name
        image = body.image if body.image is not None else self.config.game_image
        url = body.url if body.url is not None else self.config.game_url

        tx = await self.chain.write_contract(
            contract,
            "registerGame",
            [game, name, image, url],
        )
        return GameRegisterResponse(tx=tx, game=game, name=name, image=image, url=url)
