"""Forms for the match blueprint."""

from flask_wtf import FlaskForm  # type: ignore
from wtforms import IntegerField, StringField, ValidationError
from wtforms.validators import Length, Optional


class WholeNumberField(IntegerField):
    """IntegerField that rejects floats and booleans instead of truncating them."""

    def process_formdata(self, valuelist):
        if not valuelist or valuelist[0] is None or valuelist[0] == "":
            return
        raw = valuelist[0]
        if isinstance(raw, str):
            raw = raw.strip()
            digits = raw[1:] if raw.startswith("-") else raw
            is_whole = digits.isdecimal()
        else:
            is_whole = isinstance(raw, int) and not isinstance(raw, bool)
        if not is_whole:
            self.data = None
            raise ValueError(self.gettext("Damage points must be a whole number."))
        self.data = int(raw)


class EvidenceForm(FlaskForm):
    """Form for one player's match result submission."""

    participant_id = StringField("Player", validators=[Optional()])
    image_url = StringField(
        "Result Screenshot", validators=[Optional(), Length(max=2048)]
    )
    damage_points = WholeNumberField("Damage Points", validators=[Optional()])
    winner_id = StringField("Winner", validators=[Optional()])
    deck_type = StringField("Deck Type", validators=[Optional(), Length(max=32)])

    def validate_damage_points(self, field):
        """Validate that the damage is not negative."""
        if field.data is None:
            return
        if field.data < 0:
            raise ValidationError("Damage points cannot be negative.")

    def first_error(self):
        """Return the first validation message, for a flat JSON error."""
        for errors in self.errors.values():
            if errors:
                return errors[0]
        return "Invalid submission."
