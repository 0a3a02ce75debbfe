# menu_memorizer/models/menu.py
from tortoise import Model, fields


class MenuItem(Model):
    """
    Menu item (dish) the staff has to learn.
    """

    id = fields.IntField(pk=True)
    name = fields.CharField(max_length=200, index=True)
    description = fields.TextField(default="")
    category = fields.CharField(max_length=100, default="Uncategorized", index=True)
    price = fields.DecimalField(max_digits=10, decimal_places=2, default=0)
    created_at = fields.DatetimeField(auto_now_add=True)

    ingredient_links: fields.ReverseRelation["MenuItemIngredient"]

    class Meta:
        table = "menu_items"
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.name} ({self.category})"


class Ingredient(Model):
    """
    Ingredient shared by every dish that uses it. Names are unique.
    """

    id = fields.IntField(pk=True)
    name = fields.CharField(max_length=200, unique=True)

    menu_item_links: fields.ReverseRelation["MenuItemIngredient"]

    class Meta:
        table = "ingredients"
        ordering = ["id"]

    def __str__(self) -> str:
        return self.name


class MenuItemIngredient(Model):
    """
    Link between a menu item and one of its ingredients.
    """

    id = fields.IntField(pk=True)
    menu_item = fields.ForeignKeyField(
        "models.MenuItem", related_name="ingredient_links", on_delete=fields.CASCADE
    )
    ingredient = fields.ForeignKeyField(
        "models.Ingredient", related_name="menu_item_links", on_delete=fields.CASCADE
    )

    class Meta:
        table = "menu_item_ingredients"
        ordering = ["id"]
        unique_together = (("menu_item", "ingredient"),)
