"""
Region stack for snippet markup

Tracks regions opened by @start and by region-scoped @highlight, @replace
and @link tags. Regions close in LIFO order, or by name, in which case the
most recently opened region with that name is closed.
"""

from typing import Iterator, List, Optional

from ..models.markup import ActiveRegion
from .operations import Operation

ANONYMOUS = "anonymous"


class RegionStack:
    """
    Ordered collection of open regions

    Operations of open regions apply to ordinary lines oldest first.

    Example:
        >>> stack = RegionStack()
        >>> stack.push(ActiveRegion("a"))
        >>> stack.push(ActiveRegion("b"))
        >>> stack.pop_byNameOrTop("a").name
        'a'
        >>> stack.names_list()
        ['b']
    """

    def __init__(self) -> None:
        self.regions: List[ActiveRegion] = []

    def __len__(self) -> int:
        return len(self.regions)

    def __iter__(self) -> Iterator[ActiveRegion]:
        return iter(self.regions)

    def push(self, region: ActiveRegion) -> None:
        """Open a region"""
        self.regions.append(region)

    def pop_byNameOrTop(self, name: Optional[str] = None) -> Optional[ActiveRegion]:
        """
        Close a region

        Args:
            name: Region to close; None closes the most recently opened one

        Returns:
            The closed region, or None if no region matched (or the stack
            is empty); the stack is unchanged in that case
        """
        if name is None:
            return self.regions.pop() if self.regions else None

        for index in range(len(self.regions) - 1, -1, -1):
            if self.regions[index].name == name:
                return self.regions.pop(index)
        return None

    def operations_active(self) -> List[Operation]:
        """Operations of all open regions, oldest first"""
        return [region.operation for region in self.regions if region.operation is not None]

    def names_list(self) -> List[str]:
        """Names of open regions, oldest first; anonymous regions as 'anonymous'"""
        return [region.name if region.name is not None else ANONYMOUS for region in self.regions]
