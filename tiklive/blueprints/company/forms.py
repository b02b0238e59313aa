# tiklive/blueprints/company/forms.py
from flask_wtf import FlaskForm
from wtforms import BooleanField, DateTimeField, FloatField, IntegerField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, NumberRange, Optional as Opt


class TaskForm(FlaskForm):
    title = StringField("Title", validators=[DataRequired(), Length(max=200)])
    description = TextAreaField("Description", validators=[Opt()])
    category_id = IntegerField("Category", validators=[Opt()])
    product_name = StringField("Product", validators=[Opt(), Length(max=200)])
    requirements = TextAreaField("Requirements (one per line)", validators=[Opt()])
    budget_min = FloatField("Minimum budget", validators=[Opt(), NumberRange(min=0)])
    budget_max = FloatField("Maximum budget", validators=[Opt(), NumberRange(min=0)])
    live_date = DateTimeField(
        "Live date",
        format=["%Y-%m-%dT%H:%M", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%d"],
        validators=[Opt()],
    )
    duration_hours = FloatField("Duration (hours)", default=2, validators=[Opt(), NumberRange(min=0.5, max=24)])
    location = StringField("Location", validators=[Opt(), Length(max=120)])
    is_urgent = BooleanField("Urgent")
    max_applicants = IntegerField("Max applicants", default=1, validators=[Opt(), NumberRange(min=1)])
    is_advance_paid = BooleanField("Advance payment")
    paid_amount = FloatField("Paid amount", validators=[Opt(), NumberRange(min=0)])
