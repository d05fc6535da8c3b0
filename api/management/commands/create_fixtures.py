from django.core.management.base import BaseCommand
from backend.ledger.models import Category

DEFAULT_CATEGORIES = [
    {'name': 'Salary', 'category_type': 'Income'},
    {'name': 'Freelance', 'category_type': 'Income'},
    {'name': 'Investments', 'category_type': 'Income'},
    {'name': 'Other Income', 'category_type': 'Income'},
    {'name': 'Housing', 'category_type': 'Expense'},
    {'name': 'Food', 'category_type': 'Expense'},
    {'name': 'Transportation', 'category_type': 'Expense'},
    {'name': 'Utilities', 'category_type': 'Expense'},
    {'name': 'Healthcare', 'category_type': 'Expense'},
    {'name': 'Entertainment', 'category_type': 'Expense'},
    {'name': 'Shopping', 'category_type': 'Expense'},
    {'name': 'Other Expense', 'category_type': 'Expense'},
]


class Command(BaseCommand):
    help = 'Create the shared default categories visible to every user'

    def handle(self, *args, **options):
        created_categories = []
        for fixture in DEFAULT_CATEGORIES:
            category, created = Category.objects.get_or_create(
                user=None,
                name=fixture['name'],
                defaults={'category_type': fixture['category_type']}
            )
            if created:
                created_categories.append(category.name)

        self.stdout.write(
            self.style.SUCCESS(f'Successfully created {len(created_categories)} categories: {", ".join(created_categories)}')
        )
