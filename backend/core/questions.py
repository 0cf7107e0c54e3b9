"""Static coding question bank (read-only)"""

from typing import Dict, List, Optional

CODING_QUESTIONS: List[Dict] = [
    {
        "id": "two-sum",
        "title": "Two Sum",
        "description": (
            "Given an array of integers nums and an integer target, return indices "
            "of the two numbers in the array such that they add up to target.\n\n"
            "You may assume that each input would have exactly one solution, and "
            "you may not use the same element twice."
        ),
        "examples": [
            {
                "input": "nums = [2,7,11,15], target = 9",
                "output": "[0,1]",
                "explanation": "Because nums[0] + nums[1] == 9, we return [0, 1]",
            },
            {"input": "nums = [3,2,4], target = 6", "output": "[1,2]"},
        ],
        "constraints": [
            "2 ≤ nums.length ≤ 10⁴",
            "-10⁹ ≤ nums[i] ≤ 10⁹",
            "Only one valid answer exists",
        ],
        "starter_code": {
            "javascript": (
                "function twoSum(nums, target) {\n"
                "  // Write your solution here\n"
                "  \n"
                "}\n"
            ),
            "python": (
                "def two_sum(nums, target):\n"
                "    # Write your solution here\n"
                "    pass\n"
            ),
            "java": (
                "class Solution {\n"
                "    public int[] twoSum(int[] nums, int target) {\n"
                "        // Write your solution here\n"
                "        \n"
                "    }\n"
                "}\n"
            ),
        },
    },
    {
        "id": "reverse-string",
        "title": "Reverse String",
        "description": (
            "Write a function that reverses a string. The input string is given "
            "as an array of characters s.\n\n"
            "You must do this by modifying the input array in-place with O(1) "
            "extra memory."
        ),
        "examples": [
            {"input": 's = ["h","e","l","l","o"]', "output": '["o","l","l","e","h"]'},
            {"input": 's = ["H","a","n","n","a","h"]', "output": '["h","a","n","n","a","H"]'},
        ],
        "constraints": [
            "1 ≤ s.length ≤ 10⁵",
            "s[i] is a printable ascii character",
        ],
        "starter_code": {
            "javascript": (
                "function reverseString(s) {\n"
                "  // Write your solution here\n"
                "  \n"
                "}\n"
            ),
            "python": (
                "def reverse_string(s):\n"
                "    # Write your solution here\n"
                "    pass\n"
            ),
            "java": (
                "class Solution {\n"
                "    public void reverseString(char[] s) {\n"
                "        // Write your solution here\n"
                "        \n"
                "    }\n"
                "}\n"
            ),
        },
    },
    {
        "id": "palindrome-number",
        "title": "Palindrome Number",
        "description": (
            "Given an integer x, return true if x is a palindrome, and false otherwise.\n\n"
            "An integer is a palindrome when it reads the same forward and backward."
        ),
        "examples": [
            {"input": "x = 121", "output": "true"},
            {
                "input": "x = -121",
                "output": "false",
                "explanation": "From left to right, it reads -121. From right to left, it becomes 121-.",
            },
        ],
        "constraints": ["-2³¹ ≤ x ≤ 2³¹ - 1"],
        "starter_code": {
            "javascript": (
                "function isPalindrome(x) {\n"
                "  // Write your solution here\n"
                "  \n"
                "}\n"
            ),
            "python": (
                "def is_palindrome(x):\n"
                "    # Write your solution here\n"
                "    pass\n"
            ),
            "java": (
                "class Solution {\n"
                "    public boolean isPalindrome(int x) {\n"
                "        // Write your solution here\n"
                "        \n"
                "    }\n"
                "}\n"
            ),
        },
    },
]

DEFAULT_QUESTION_ID = CODING_QUESTIONS[0]["id"]

def get_question(question_id: str) -> Optional[Dict]:
    for question in CODING_QUESTIONS:
        if question["id"] == question_id:
            return question
    return None

def starter_code(question_id: str, language: str) -> str:
    """Starter code for a question/language pair, empty if either is unknown."""
    question = get_question(question_id)
    if not question:
        return ""
    return question["starter_code"].get(language, "")
