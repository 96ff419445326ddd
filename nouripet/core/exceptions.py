"""Domain errors raised by the nutrition and pricing core."""


class UnknownRecipeError(LookupError):
    """A recipe slug that is not in the catalog."""

    def __init__(self, slug: str):
        super().__init__(f"Unknown recipe: {slug}")
        self.slug = slug


class NoEnergyDensityError(ValueError):
    """No recipe was selected, so daily grams cannot be derived."""
