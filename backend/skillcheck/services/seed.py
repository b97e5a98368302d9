"""Default test catalog and recommendation catalog.

`seed_catalog` is idempotent: rows whose id already exists are left alone,
so edits made to a seeded row survive restarts.
"""

import json
import logging

from sqlalchemy.orm import Session

from skillcheck.models.recommendation import Recommendation
from skillcheck.models.test import Test, TestQuestion
from skillcheck.services import store

logger = logging.getLogger(__name__)


def _q(question: str, options: list[str], correct: str) -> dict:
    ids = "abcdefgh"
    return {
        "question": question,
        "options": [{"id": ids[i], "text": text} for i, text in enumerate(options)],
        "correct_answer": correct,
    }


DEFAULT_TESTS = [
    {
        "id": "1",
        "title": "Frontend Basics",
        "description": "HTML, CSS and JavaScript fundamentals",
        "duration": "30 minutes",
        "category": "Frontend",
        "icon": "LayoutGrid",
        "difficulty": "Beginner",
        "questions": [
            _q("What is the correct way to declare a variable in modern JavaScript?",
               ["var name = 'value';", "let name = 'value';", "const name = 'value';", "Both b and c are correct."], "d"),
            _q("Which CSS property changes the background color of an element?",
               ["color", "background-color", "bgcolor", "background"], "b"),
            _q("Which HTML tag creates a hyperlink?",
               ["<a>", "<link>", "<href>", "<hyperlink>"], "a"),
            _q("Which array method adds elements to the end?",
               ["push()", "append()", "add()", "insert()"], "a"),
            _q("Which CSS selector targets elements with a given class?",
               ["#name", ".name", "*name", "name"], "b"),
        ],
    },
    {
        "id": "2",
        "title": "Algorithms and Data Structures",
        "description": "Sorting, searching and data structures",
        "duration": "45 minutes",
        "category": "Algorithms",
        "icon": "Layers",
        "difficulty": "Intermediate",
        "questions": [
            _q("What is the average-case time complexity of QuickSort?",
               ["O(n)", "O(n log n)", "O(n²)", "O(log n)"], "b"),
            _q("Which data structure follows LIFO (Last In, First Out)?",
               ["Queue", "Stack", "Linked list", "Tree"], "b"),
            _q("Which sorting algorithm is most efficient on nearly sorted arrays?",
               ["Bubble Sort", "Merge Sort", "Insertion Sort", "Selection Sort"], "c"),
            _q("Which data structure best implements a dictionary?",
               ["Array", "Linked List", "Hash Table", "Stack"], "c"),
            _q("What is the time complexity of binary search?",
               ["O(n)", "O(n log n)", "O(n²)", "O(log n)"], "d"),
        ],
    },
    {
        "id": "3",
        "title": "Backend Fundamentals",
        "description": "HTTP, REST APIs and authentication",
        "duration": "30 minutes",
        "category": "Backend",
        "icon": "Server",
        "difficulty": "Intermediate",
        "questions": [
            _q("Which HTTP method is idempotent and replaces a resource?",
               ["POST", "PUT", "PATCH", "CONNECT"], "b"),
            _q("Which status code means a resource was created?",
               ["200", "201", "204", "302"], "b"),
            _q("Where is a bearer token usually sent?",
               ["Query string", "Authorization header", "Cookie path", "Request body"], "b"),
            _q("What does Express middleware receive besides req and res?",
               ["next", "done", "app", "router"], "a"),
        ],
    },
    {
        "id": "4",
        "title": "Databases",
        "description": "SQL queries, modeling and indexes",
        "duration": "30 minutes",
        "category": "Databases",
        "icon": "Database",
        "difficulty": "Intermediate",
        "questions": [
            _q("Which clause filters groups after aggregation?",
               ["WHERE", "HAVING", "ORDER BY", "LIMIT"], "b"),
            _q("Which normal form removes transitive dependencies?",
               ["1NF", "2NF", "3NF", "None"], "c"),
            _q("What usually speeds up lookups on a column?",
               ["A trigger", "An index", "A view", "A sequence"], "b"),
            _q("Which of these is a document database?",
               ["PostgreSQL", "MongoDB", "SQLite", "MySQL"], "b"),
        ],
    },
    {
        "id": "5",
        "title": "DevOps Essentials",
        "description": "Version control, containers and delivery pipelines",
        "duration": "25 minutes",
        "category": "DevOps",
        "icon": "GitBranch",
        "difficulty": "Beginner",
        "questions": [
            _q("Which command creates a new Git branch and switches to it?",
               ["git branch -d", "git switch -c", "git merge", "git tag"], "b"),
            _q("Which file describes how to build a Docker image?",
               ["compose.lock", "Dockerfile", "image.yml", "build.json"], "b"),
            _q("What does CI stand for?",
               ["Continuous Integration", "Code Inspection", "Container Image", "Central Index"], "a"),
        ],
    },
]

DEFAULT_RECOMMENDATIONS = [
    {
        "id": "1",
        "title": "Course: React from scratch",
        "description": "Learn the fundamentals of React and improve your Frontend web development skills",
        "category": "Frontend",
        "difficulty": "Intermediate",
        "duration": "10 hours",
        "icon": "Code2",
        "url": "https://www.freecodecamp.org/learn/front-end-development-libraries/#react",
        "platform": "freeCodeCamp",
    },
    {
        "id": "2",
        "title": "Project: REST API with Node.js",
        "description": "Build a complete backend API with authentication and a database",
        "category": "Backend",
        "difficulty": "Intermediate",
        "duration": "15 hours",
        "icon": "FileCode2",
        "url": "https://www.udemy.com/course/nodejs-the-complete-guide/",
        "platform": "Udemy",
    },
    {
        "id": "3",
        "title": "Course: Sorting algorithms",
        "description": "Understand and apply the main sorting algorithms",
        "category": "Algorithms",
        "difficulty": "Intermediate",
        "duration": "8 hours",
        "icon": "Layers",
        "url": "https://www.coursera.org/learn/algorithms-part1",
        "platform": "Coursera",
    },
    {
        "id": "4",
        "title": "Exercise: SQL query optimization",
        "description": "Improve the performance of complex queries in relational databases",
        "category": "Databases",
        "difficulty": "Advanced",
        "duration": "5 hours",
        "icon": "Database",
        "url": "https://www.codecademy.com/learn/learn-sql",
        "platform": "Codecademy",
    },
    {
        "id": "5",
        "title": "Course: Docker fundamentals",
        "description": "Learn to containerize applications and manage images",
        "category": "DevOps",
        "difficulty": "Beginner",
        "duration": "12 hours",
        "icon": "Layers",
        "url": "https://www.docker.com/101-tutorial/",
        "platform": "Official documentation",
    },
    {
        "id": "11",
        "title": "Introduction to Cybersecurity",
        "description": "Learn the fundamentals of information security and data protection",
        "category": "Security",
        "difficulty": "Beginner",
        "duration": "15 hours",
        "icon": "Shield",
        "url": "https://www.netacad.com/courses/introduction-to-cybersecurity",
        "platform": "Netacad",
    },
    {
        "id": "12",
        "title": "Course: Mobile app development with Flutter",
        "description": "Build native iOS and Android applications from a single code base",
        "category": "Mobile",
        "difficulty": "Intermediate",
        "duration": "25 hours",
        "icon": "Smartphone",
        "url": "https://flutter.dev/learn",
        "platform": "Official documentation",
    },
    {
        "id": "13",
        "title": "AWS Cloud Fundamentals",
        "description": "Learn to use the core Amazon Web Services cloud services",
        "category": "Cloud",
        "difficulty": "Beginner",
        "duration": "20 hours",
        "icon": "Cloud",
        "url": "https://aws.amazon.com/training/learn-about/",
        "platform": "AWS Training",
    },
    {
        "id": "14",
        "title": "Course: Machine Learning with Python",
        "description": "Introduction to machine learning algorithms and artificial intelligence",
        "category": "AI",
        "difficulty": "Intermediate",
        "duration": "30 hours",
        "icon": "Brain",
        "url": "https://www.coursera.org/learn/machine-learning-with-python",
        "platform": "Coursera",
    },
    {
        "id": "15",
        "title": "User Interface Design",
        "description": "Learn the fundamental principles of UI/UX design",
        "category": "Design",
        "difficulty": "Beginner",
        "duration": "12 hours",
        "icon": "Palette",
        "url": "https://www.interaction-design.org/courses",
        "platform": "Interaction Design",
    },
]


def seed_catalog(db: Session) -> dict:
    """Insert missing default tests and recommendations. Caller commits."""
    added_tests = 0
    for data in DEFAULT_TESTS:
        if store.get_test(db, data["id"]) is not None:
            continue
        test = Test(**{k: v for k, v in data.items() if k != "questions"})
        test.questions = [
            TestQuestion(
                position=i,
                question=q["question"],
                options=json.dumps(q["options"], ensure_ascii=False),
                correct_answer=q["correct_answer"],
            )
            for i, q in enumerate(data["questions"])
        ]
        store.save_test(db, test)
        added_tests += 1

    added_recs = 0
    for seq, data in enumerate(DEFAULT_RECOMMENDATIONS, start=1):
        if store.get_recommendation(db, data["id"]) is not None:
            continue
        store.save_recommendation(db, Recommendation(seq=seq, **data))
        added_recs += 1

    if added_tests or added_recs:
        logger.info("Seeded %d tests and %d recommendations", added_tests, added_recs)
    return {"tests": added_tests, "recommendations": added_recs}
