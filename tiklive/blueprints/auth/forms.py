# tiklive/blueprints/auth/forms.py
from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, BooleanField, SelectField
from wtforms.validators import DataRequired, Email, Length, Optional as Opt, Regexp


def _strip(value):
    return value.strip() if isinstance(value, str) else value


PASSWORD_VALIDATORS = [
    DataRequired(),
    Length(min=6, message="Password must be at least 6 characters."),
]


class SignupForm(FlaskForm):
    email = StringField("Email", filters=[_strip], validators=[DataRequired(), Email(), Length(max=255)])
    password = PasswordField("Password", validators=PASSWORD_VALIDATORS)
    user_type = SelectField(
        "Account type",
        choices=[("influencer", "Influencer"), ("company", "Company")],
        validators=[DataRequired()],
    )
    phone = StringField("Phone", validators=[Opt(), Regexp(r"^1[3-9]\d{9}$", message="Invalid phone number.")])
    verification_ticket = StringField("Verification ticket", validators=[Opt()])


class LoginForm(FlaskForm):
    email = StringField("Email", filters=[_strip], validators=[DataRequired(), Email(), Length(max=255)])
    password = PasswordField("Password", validators=[DataRequired()])
    remember = BooleanField("Keep me signed in")
