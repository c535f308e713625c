from __future__ import annotations

from dataclasses import asdict, dataclass, fields

from bioalgos.common import CATEGORIES, Difficulty, slugify

DEFAULT_STARTER_CODE = "function solution(input) {\n  // Your code here\n  return output;\n}"

TITLE_MIN_LENGTH = 2
DESCRIPTION_MIN_LENGTH = 10


class ValidationError(ValueError):
    """Form input rejected before any storage call. ``errors`` maps field -> message."""

    def __init__(self, errors: dict):
        self.errors = errors
        super().__init__('; '.join(f'{k}: {v}' for k, v in errors.items()))


@dataclass
class ProblemForm:
    title: str = ''
    difficulty: str = Difficulty.MEDIUM.value
    category: str = 'dynamic-programming'
    description: str = ''
    example_input: str = ''
    example_output: str = ''
    example_explanation: str = ''
    constraints: str = ''
    starter_code_js: str = DEFAULT_STARTER_CODE

    @classmethod
    def field_names(cls) -> tuple:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_problem(cls, problem: dict) -> ProblemForm:
        """Populate the form from a stored Problem, tolerating missing fields."""
        examples = problem.get('examples') or []
        first = examples[0] if examples else {}
        constraints = problem.get('constraints')
        starter = problem.get('starterCode') or {}
        return cls(
            title=problem.get('title') or '',
            difficulty=problem.get('difficulty') or Difficulty.MEDIUM.value,
            category=problem.get('category') or 'dynamic-programming',
            description=problem.get('description') or '',
            example_input=first.get('input') or '',
            example_output=first.get('output') or '',
            example_explanation=first.get('explanation') or '',
            constraints='\n'.join(constraints) if isinstance(constraints, list) else '',
            starter_code_js=starter.get('javascript') or '',
        )

    @classmethod
    def from_dict(cls, data: dict) -> ProblemForm:
        known = cls.field_names()
        return cls(**{k: v for k, v in (data or {}).items() if k in known})

    def to_dict(self) -> dict:
        return asdict(self)

    def validate(self) -> None:
        errors = {}
        if len(self.title or '') < TITLE_MIN_LENGTH:
            errors['title'] = f'Title must be at least {TITLE_MIN_LENGTH} characters.'
        if self.difficulty not in {d.value for d in Difficulty}:
            errors['difficulty'] = 'Difficulty must be one of easy, medium, hard.'
        if self.category not in CATEGORIES:
            errors['category'] = f'Unknown category: {self.category!r}'
        if len(self.description or '') < DESCRIPTION_MIN_LENGTH:
            errors['description'] = (
                f'Description must be at least {DESCRIPTION_MIN_LENGTH} characters.'
            )
        if errors:
            raise ValidationError(errors)

    def constraint_list(self) -> list[str]:
        lines = (line.strip() for line in (self.constraints or '').split('\n'))
        return [line for line in lines if line]

    def to_problem(self, existing: dict | None = None) -> dict:
        """Build the full Problem record to store.

        With *existing*, fields the form does not edit (id, hints, test cases,
        other starter-code languages) are carried over, since updates are a
        full replace.
        """
        example = {'input': self.example_input, 'output': self.example_output}
        if self.example_explanation:
            example['explanation'] = self.example_explanation

        record = dict(existing or {})
        record.update({
            'title': self.title,
            'slug': slugify(self.title),
            'difficulty': self.difficulty,
            'category': self.category,
            'description': self.description,
            'examples': [example],
            'constraints': self.constraint_list(),
            'starterCode': {
                **(record.get('starterCode') or {}),
                'javascript': self.starter_code_js,
            },
        })
        return record
