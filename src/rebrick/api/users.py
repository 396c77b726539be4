"""
Users API
=========
Everything under ``/api/v3/users``: the logged-in user's collection (part
lists, set lists, sets, parts, minifigs, lost parts, builds) and badges.
"""

from typing import Any, Dict, Optional, Union

from rebrick.api.auth import Authenticator
from rebrick.api.exceptions import TransportError
from rebrick.api.options import Config, as_query
from rebrick.api.request_handler import RequestHandler
from rebrick.api.results import NO_RESULT
from rebrick.services.debug_logger import get_logger, log_exception

logger = get_logger("api.users")

Id = Union[int, str]


class UsersAPI:
    """
    User collection endpoints. Each call logs in first (a no-op once a token
    is held) and the user token becomes part of the path:
    - All parts, lost parts, minifigs and builds
    - Part lists and their parts
    - Set lists and their sets
    - The user's sets and parts
    - Profile and badges
    - Color usage aggregated across part lists

    If login does not produce a token the call returns ``NO_RESULT`` without
    touching the network, and the next call tries to log in again.
    """

    PART_LIST_PAGE_SIZE = 500

    def __init__(self, requests: RequestHandler, auth: Authenticator):
        self._requests = requests
        self._auth = auth

    @property
    def token(self) -> Optional[str]:
        """User token of the logged-in user, if any"""
        return self._auth.token

    async def _get_user(self, path: str, config: Config = None) -> Any:
        if not await self._auth.login():
            return NO_RESULT
        return await self._requests.request("GET", f"users/{self.token}/{path}", as_query(config))

    async def get_all_parts(self, config: Config = None) -> Any:
        """
        Get all Parts in the user's Part Lists plus the Parts inside Sets in
        the user's Set Lists.

        This call is very resource intensive on the server, do not overuse it.
        """
        return await self._get_user("allparts", config)

    async def get_build(self, set_num: str, config: Config = None) -> Any:
        """
        Find out how many parts the user needs to build the specified Set,
        using the user's default Build Settings.
        """
        return await self._get_user(f"build/{set_num}", config)

    async def get_lost_parts(self, config: Config = None) -> Any:
        """Get a list of all the Lost Parts from the user's LEGO collection."""
        return await self._get_user("lost_parts", config)

    async def get_minifigs(self, config: Config = None) -> Any:
        """
        Get all Minifigs in all the user's Sets. Read-only: minifigs are
        derived from the Sets in the user's Set Lists.
        """
        return await self._get_user("minifigs", config)

    # ==================== PART LISTS ====================

    async def get_part_lists(self, config: Config = None) -> Any:
        return await self._get_user("partlists", config)

    async def get_part_list(self, list_id: Id, config: Config = None) -> Any:
        return await self._get_user(f"partlists/{list_id}", config)

    async def get_part_list_parts(self, list_id: Id, config: Config = None) -> Any:
        """Get a list of all the Parts in a specific Part List."""
        return await self._get_user(f"partlists/{list_id}/parts", config)

    async def get_parts(self, config: Config = None) -> Any:
        """
        Get a list of all the Parts in all the user's Part Lists.

        Args:
            config: UserPartSearch (part_num, part_cat_id, color_id, paging)
        """
        return await self._get_user("parts", config)

    async def get_profile(self) -> Any:
        return await self._get_user("profile")

    # ==================== SET LISTS ====================

    async def get_set_lists(self, config: Config = None) -> Any:
        return await self._get_user("setlists", config)

    async def get_set_list(self, list_id: Id) -> Any:
        return await self._get_user(f"setlists/{list_id}")

    async def get_set_list_sets(self, list_id: Id, config: Config = None) -> Any:
        """Get a list of all the Sets in a specific Set List."""
        return await self._get_user(f"setlists/{list_id}/sets", config)

    async def get_set_list_set(self, set_num: str, list_id: Id, config: Config = None) -> Any:
        """Get details about a specific Set in the Set List."""
        return await self._get_user(f"setlists/{list_id}/sets/{set_num}", config)

    async def get_sets(self, config: Config = None) -> Any:
        """
        Get a list of all the Sets in the user's LEGO collection.

        Args:
            config: UserSetSearch (set_num, theme_id, year/part ranges, search, paging)
        """
        return await self._get_user("sets", config)

    async def get_set(self, set_num: str, config: Config = None) -> Any:
        """Get details about a specific Set in the user's LEGO collection."""
        return await self._get_user(f"sets/{set_num}", config)

    # ==================== BADGES ====================

    async def get_badges(self, config: Config = None) -> Any:
        """Get a list of all the available Badges"""
        if not await self._auth.login():
            return NO_RESULT
        return await self._requests.request("GET", "users/badges", as_query(config))

    async def get_badge(self, badge_id: Id, config: Config = None) -> Any:
        """Get details about a specific Badge"""
        if not await self._auth.login():
            return NO_RESULT
        return await self._requests.request("GET", f"users/badges/{badge_id}", as_query(config))

    # ==================== AGGREGATES ====================

    async def get_all_colors_from_part_lists(self) -> Any:
        """
        Get the colors used across all of the user's Part Lists.

        Returns:
            Dict of color name -> color object with an added ``count`` (total
            quantity of parts in that color), or ``NO_RESULT`` if the part
            lists could not be fetched. A part list whose parts cannot be
            fetched is skipped.
        """
        part_lists = await self.get_part_lists()
        if not part_lists:
            return NO_RESULT

        all_colors: Dict[str, Dict[str, Any]] = {}
        for part_list in part_lists.get("results", []):
            try:
                parts = await self.get_part_list_parts(
                    part_list["id"], {"page_size": self.PART_LIST_PAGE_SIZE}
                )
            except TransportError as e:
                log_exception(logger, e, f"part list {part_list['id']}")
                continue
            if not parts:
                logger.warning(f"Skipping part list {part_list['id']}: no parts returned")
                continue

            for part in parts.get("results", []):
                color = part["color"]
                name = color["name"]
                if name not in all_colors:
                    # Copy so cached payloads are never mutated
                    all_colors[name] = {**color, "count": 0}
                all_colors[name]["count"] += part["quantity"]

        logger.debug(f"Collected {len(all_colors)} colors from part lists")
        return all_colors
