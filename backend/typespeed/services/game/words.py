"""Word pools and per-word time budgets for each difficulty level."""

from typing import Dict, List

LEVELS = ('Easy', 'Normal', 'Hard')

DEFAULT_LEVEL_SECONDS: Dict[str, int] = {
    'Easy': 5,
    'Normal': 3,
    'Hard': 2,
}

WORDS_BY_LEVEL: Dict[str, List[str]] = {
    'Easy': [
        'Hello', 'World', 'Code', 'Test', 'Play', 'Game', 'Fun', 'Learn',
        'Program', 'JavaScript', 'HTML', 'CSS', 'Web', 'Design', 'Build',
        'Create', 'Develop', 'Debug', 'Error', 'Success', 'Start', 'Stop',
        'Run', 'Save', 'Load', 'Data', 'File', 'Folder', 'System', 'User',
    ],
    'Normal': [
        'Programming', 'Javascript', 'Documentation', 'Destructuring', 'Paradigm',
        'Styling', 'Cascade', 'Coding', 'Dependencies', 'Runner', 'Testing',
        'Youtube', 'Linkedin', 'Twitter', 'Github', 'Leetcode', 'Internet',
        'Python', 'Scala', 'Rust', 'Framework', 'Library', 'Module', 'Package',
        'Repository', 'Commit', 'Branch', 'Merge', 'Conflict', 'Resolution', 'Algorithm',
    ],
    # "Async/Await" cannot pass input validation; typing it only skips the word
    'Hard': [
        'Asynchronous', 'Callback', 'Promise', 'Async/Await', 'Middleware',
        'Authentication', 'Authorization', 'Encryption', 'Compression', 'Serialization',
        'Deserialization', 'Polymorphism', 'Inheritance', 'Encapsulation', 'Abstraction',
        'Refactoring', 'Optimization', 'Profiling', 'Debugging', 'Deployment',
        'Containerization', 'Orchestration', 'Microservices', 'Architecture', 'Scalability',
    ],
}
