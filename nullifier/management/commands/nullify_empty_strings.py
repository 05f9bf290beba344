"""
Management command to replace empty strings already stored in nullifiable
columns with NULL.

NullifierMixin only converts values as they are written, so rows saved before
the mixin was added (or written with raw SQL) can still hold ''.

Usage:
    python manage.py nullify_empty_strings                   # every NullifierMixin model
    python manage.py nullify_empty_strings myapp             # models of one app
    python manage.py nullify_empty_strings myapp.Contact     # one model
    python manage.py nullify_empty_strings --dry-run         # count only
"""
import logging

from django.apps import apps
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from nullifier.mixins import NullifierMixin

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Replace empty strings stored in nullifiable text columns with NULL'

    def add_arguments(self, parser):
        parser.add_argument(
            'labels',
            nargs='*',
            metavar='app_label[.ModelName]',
            help='Restrict to these apps or models. Defaults to every NullifierMixin model.'
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Report how many rows would change without updating them'
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        selected_models = self.get_models(options['labels'])

        total_rows = 0
        changed_models = 0
        for model in selected_models:
            counts = self.nullify_model(model, dry_run, selected_models)
            model_rows = sum(counts.values())
            if not model_rows:
                continue

            changed_models += 1
            total_rows += model_rows
            for field_name, count in counts.items():
                if count:
                    self.stdout.write(f"  {model._meta.label}.{field_name}: {count} row(s)")
            logger.info(
                f"{'Found' if dry_run else 'Nullified'} {model_rows} empty string(s) in {model._meta.label}"
            )

        verb = 'Would nullify' if dry_run else 'Nullified'
        self.stdout.write(self.style.SUCCESS(
            f"{verb} {total_rows} empty string(s) across {changed_models} model(s)."
        ))

    def get_models(self, labels):
        """
        Resolve app_label / app_label.ModelName labels to NullifierMixin models.

        Raises:
            CommandError: Unknown label, or a model label without NullifierMixin
        """
        if not labels:
            return [model for model in apps.get_models() if self.is_candidate(model)]

        selected = []
        for label in labels:
            if '.' in label:
                try:
                    model = apps.get_model(label)
                except (LookupError, ValueError) as e:
                    raise CommandError(f"Unknown model: {label} ({e})")
                if not issubclass(model, NullifierMixin):
                    raise CommandError(f"{label} does not use NullifierMixin")
                candidates = [model]
            else:
                try:
                    app_config = apps.get_app_config(label)
                except LookupError as e:
                    raise CommandError(str(e))
                candidates = app_config.get_models()

            for model in candidates:
                if self.is_candidate(model) and model not in selected:
                    selected.append(model)
        return selected

    @staticmethod
    def owned_by_other(field, model, selected_models):
        owner = field.model._meta.concrete_model
        return owner is not model._meta.concrete_model and owner in selected_models

    @staticmethod
    def is_candidate(model):
        return issubclass(model, NullifierMixin) and not model._meta.proxy

    def nullify_model(self, model, dry_run, selected_models=()):
        """
        Nullify '' in every nullifiable column of `model`.

        Columns inherited from a parent model that is also in `selected_models`
        are left to that parent, so each column is counted once.

        Returns:
            dict: field_name -> number of rows holding ''
        """
        field_names = [
            field.attname for field in model._meta.concrete_fields
            if not self.owned_by_other(field, model, selected_models)
            and model.is_nullifiable(field.attname)
        ]

        counts = {}
        with transaction.atomic(using=model._base_manager.db):
            for field_name in field_names:
                rows = model._base_manager.filter(**{field_name: ''})
                if dry_run:
                    counts[field_name] = rows.count()
                else:
                    counts[field_name] = rows.update(**{field_name: None})
        return counts
