"""
Tests for the cross-question dependency resolver.

Tests verify that:
    - Groups are detected from titles
    - Each rule fires only under its condition
    - Adjusted vectors still sum to 100
    - Unrelated questions are untouched
"""

from surveyweights.dependencies import find_group, normalize_weights, resolve_dependencies
from surveyweights import classifiers as cls
from surveyweights.model import Option, Question


def question(qid, title, weighted_options):
    return Question(id=qid, title=title, options=[Option(v, w) for v, w in weighted_options])


def young_age():
    return question("age", "What is your age?", [("Under 18", 60), ("18-24", 10), ("25-34", 30)])


def adult_age():
    return question("age", "What is your age?", [("18-24", 20), ("25-34", 50), ("35+", 30)])


class TestNormalizeWeights:
    """Test proportional renormalization."""

    def test_scales_to_100(self):
        assert normalize_weights([1, 1, 2]) == [25, 25, 50]

    def test_residual_to_largest(self):
        result = normalize_weights([1, 1, 1])
        assert sum(result) == 100
        assert result == [34, 33, 33]

    def test_minimum_one(self):
        result = normalize_weights([0, 1000])
        assert result == [1, 99]

    def test_all_zero_even_split(self):
        assert normalize_weights([0, 0, 0]) == [34, 33, 33]

    def test_empty(self):
        assert normalize_weights([]) == []


class TestGroupDetection:
    def test_first_question_with_options(self):
        questions = [
            Question(id="free", title="Your age in years"),
            question("age", "Age group", [("Under 18", 50), ("18+", 50)]),
        ]
        assert find_group(questions, cls.AGE).id == "age"

    def test_no_group(self):
        assert find_group([question("q", "Favourite fruit", [("A", 100)])], cls.AGE) is None


class TestAgeProfession:
    """Age -> Profession suppression."""

    def test_working_professional_suppressed(self):
        """Under-18 audience: working professional <= 24, student >= 40."""
        profession = question("prof", "What is your profession?",
                              [("Student", 20), ("Working Professional", 80)])
        resolve_dependencies([young_age(), profession])
        student, working = profession.weights()
        assert working <= 24
        assert student >= 40
        assert student + working == 100

    def test_suppressed_option_keeps_its_value(self):
        """Renormalization rescales only the options a rule did not suppress."""
        profession = question("prof", "What is your profession?",
                              [("Student", 20), ("Working Professional", 80)])
        resolve_dependencies([young_age(), profession])
        assert profession.weights() == [76, 24]

    def test_everything_suppressed_falls_back_to_proportional(self):
        profession = question("prof", "What is your profession?",
                              [("Working Professional", 50), ("Business owner", 50)])
        resolve_dependencies([young_age(), profession])
        assert profession.weights() == [50, 50]

    def test_retired_suppressed_when_young(self):
        profession = question("prof", "Occupation",
                              [("Student", 30), ("Employed", 30), ("Retired", 40)])
        resolve_dependencies([young_age(), profession])
        weights = profession.weights()
        assert sum(weights) == 100
        assert weights[2] == 6
        assert weights[1] == 9
        assert weights[0] == 85

    def test_no_under_18_option_no_change(self):
        profession = question("prof", "What is your profession?",
                              [("Student", 20), ("Working Professional", 80)])
        resolve_dependencies([adult_age(), profession])
        assert profession.weights() == [20, 80]

    def test_unweighted_age_question_ignored(self):
        age = Question(id="age", title="What is your age?", options=[Option("Under 18"), Option("18+")])
        profession = question("prof", "What is your profession?",
                              [("Student", 20), ("Working Professional", 80)])
        resolve_dependencies([age, profession])
        assert profession.weights() == [20, 80]


class TestIncome:
    """Age -> Income and Profession -> Income."""

    def test_age_suppresses_high_income(self):
        income = question("inc", "Monthly income",
                          [("No income", 10), ("10,000 - 20,000", 40), ("Above 50,000", 50)])
        resolve_dependencies([young_age(), income])
        low, middle, high = income.weights()
        assert low + middle + high == 100
        assert high == 5
        assert low >= 35
        assert low > 10

    def test_student_heavy_profession_suppresses_high_income(self):
        profession = question("prof", "Your occupation",
                              [("Student", 60), ("Engineer", 40)])
        income = question("inc", "Annual salary",
                          [("Nil", 20), ("3 lakh", 30), ("5 lakh", 50)])
        resolve_dependencies([adult_age(), profession, income])
        nil, three, five = income.weights()
        assert nil + three + five == 100
        assert five == 10
        assert nil >= 30

    def test_student_mass_threshold(self):
        profession = question("prof", "Your occupation", [("Student", 30), ("Engineer", 70)])
        income = question("inc", "Annual salary", [("Nil", 20), ("5 lakh", 80)])
        resolve_dependencies([adult_age(), profession, income])
        assert income.weights() == [20, 80]


class TestAgeEducation:
    def test_post_graduate_suppressed(self):
        education = question("edu", "Highest education",
                             [("High school", 20), ("Bachelor", 40), ("Master's", 30), ("PhD", 10)])
        resolve_dependencies([young_age(), education])
        school, bachelor, master, phd = education.weights()
        assert school + bachelor + master + phd == 100
        assert master == 2
        assert phd == 1
        assert school >= 40


class TestPassThrough:
    def test_unrelated_questions_untouched(self):
        other = question("fruit", "Favourite fruit", [("Apple", 70), ("Pear", 30)])
        profession = question("prof", "What is your profession?",
                              [("Student", 20), ("Working Professional", 80)])
        questions = [young_age(), other, profession]
        result = resolve_dependencies(questions)
        assert result is questions
        assert other.weights() == [70, 30]
        assert questions[0].weights() == [60, 10, 30]

    def test_empty_list(self):
        assert resolve_dependencies([]) == []
