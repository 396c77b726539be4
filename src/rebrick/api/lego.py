"""
LEGO Catalog API
================
Everything under ``/api/v3/lego``: colors, elements, minifigs, parts, part
categories, sets and themes.
"""

from typing import Any, Union

from rebrick.api.options import Config, as_query
from rebrick.api.request_handler import RequestHandler

Id = Union[int, str]


class LegoAPI:
    """
    Catalog endpoints (API key only, no login needed):
    - Colors and elements
    - Minifigs and their parts/sets
    - Parts, part categories and part/color combinations
    - Sets and their alternates, minifigs, parts and sub-sets
    - Themes

    Every method returns the parsed JSON payload, or ``NO_RESULT`` when the
    API reported an error.
    """

    def __init__(self, requests: RequestHandler):
        self._requests = requests

    async def _get(self, path: str, config: Config = None) -> Any:
        return await self._requests.request("GET", path, as_query(config))

    # ==================== COLORS ====================

    async def get_colors(self, config: Config = None) -> Any:
        """
        Get a list of all Colors.

        Args:
            config: PageOptions (page, page_size, ordering)
        """
        return await self._get("lego/colors", config)

    async def get_color(self, color_id: Id, config: Config = None) -> Any:
        """
        Get details about a specific Color.

        Args:
            color_id: Rebrickable color id, e.g. 7
            config: OrderingOptions
        """
        return await self._get(f"lego/colors/{color_id}", config)

    async def get_element(self, element_id: str) -> Any:
        """Get details about a specific Element ID."""
        return await self._get(f"lego/elements/{element_id}")

    # ==================== MINIFIGS ====================

    async def get_minifigs(self, config: Config = None) -> Any:
        """
        Get a list of Minifigs.

        Args:
            config: MinifigSearch (min/max parts, in_set_num, in_theme_id, search, paging)
        """
        return await self._get("lego/minifigs", config)

    async def get_minifig(self, set_num: str) -> Any:
        """Get details for a specific Minifig."""
        return await self._get(f"lego/minifigs/{set_num}")

    async def get_minifig_parts(self, set_num: str, config: Config = None) -> Any:
        """Get a list of all Inventory Parts in this Minifig."""
        return await self._get(f"lego/minifigs/{set_num}/parts", config)

    async def get_minifig_sets(self, set_num: str, config: Config = None) -> Any:
        """Get a list of Sets a Minifig has appeared in."""
        return await self._get(f"lego/minifigs/{set_num}/sets", config)

    # ==================== PART CATEGORIES ====================

    async def get_part_categories(self, config: Config = None) -> Any:
        return await self._get("lego/part_categories", config)

    async def get_part_category(self, part_category_id: Id, config: Config = None) -> Any:
        return await self._get(f"lego/part_categories/{part_category_id}", config)

    # ==================== PARTS ====================

    async def get_parts(self, config: Config = None) -> Any:
        """
        Get a list of Parts.

        Args:
            config: PartSearch (part_num(s), part_cat_id, color_id, external ids, search, paging)
        """
        return await self._get("lego/parts", config)

    async def get_part(self, part_num: str) -> Any:
        """Get details about a specific Part."""
        return await self._get(f"lego/parts/{part_num}")

    async def get_part_colors(self, part_num: str, config: Config = None) -> Any:
        """Get a list of all Colors a Part has appeared in."""
        return await self._get(f"lego/parts/{part_num}/colors", config)

    async def get_part_color(self, part_num: str, color_id: Id) -> Any:
        """Get details about a specific Part/Color combination."""
        return await self._get(f"lego/parts/{part_num}/colors/{color_id}")

    async def get_part_color_sets(self, part_num: str, color_id: Id, config: Config = None) -> Any:
        """Get a list of all Sets the Part/Color combination has appeared in."""
        return await self._get(f"lego/parts/{part_num}/colors/{color_id}/sets", config)

    # ==================== SETS ====================

    async def get_sets(self, config: Config = None) -> Any:
        """
        Get a list of Sets, optionally filtered.

        Args:
            config: SetSearch (theme_id, min/max year, min/max parts, search, paging)
        """
        return await self._get("lego/sets", config)

    async def get_set(self, set_num: str) -> Any:
        """Get details for a specific Set."""
        return await self._get(f"lego/sets/{set_num}")

    async def get_set_alternates(self, set_num: str, config: Config = None) -> Any:
        """
        Get a list of MOCs which are Alternate Builds of a specific Set, i.e.
        all parts in the MOC can be found in the Set.
        """
        return await self._get(f"lego/sets/{set_num}/alternates", config)

    async def get_set_minifigs(self, set_num: str, config: Config = None) -> Any:
        """Get a list of all Inventory Minifigs in this Set."""
        return await self._get(f"lego/sets/{set_num}/minifigs", config)

    async def get_set_parts(self, set_num: str, config: Config = None) -> Any:
        """Get a list of all Inventory Parts in this Set."""
        return await self._get(f"lego/sets/{set_num}/parts", config)

    async def get_set_sets(self, set_num: str, config: Config = None) -> Any:
        """Get a list of all Inventory Sets in this Set."""
        return await self._get(f"lego/sets/{set_num}/sets", config)

    # ==================== THEMES ====================

    async def get_themes(self, config: Config = None) -> Any:
        """Return all Themes"""
        return await self._get("lego/themes", config)

    async def get_theme(self, theme_id: Id, config: Config = None) -> Any:
        """Return details for a specific Theme"""
        return await self._get(f"lego/themes/{theme_id}", config)
