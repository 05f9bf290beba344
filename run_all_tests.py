"""Test Summary Script - Runs each nullifier test module and reports results"""
import subprocess
import sys
import re

# Test modules of the nullifier app
TEST_MODULES = [
    'nullifier.tests.test_mixins',
    'nullifier.tests.test_managers',
    'nullifier.tests.test_serializers',
    'nullifier.tests.test_commands',
]


def run_tests(module):
    """Run tests for a specific module and return results"""
    result = {'module': module, 'total': 0, 'passed': 0, 'failed': 0}
    try:
        completed = subprocess.run(
            [sys.executable, 'manage.py', 'test', module, '-v', '1'],
            capture_output=True,
            text=True,
            timeout=300
        )
    except subprocess.TimeoutExpired:
        result['status'] = 'TIMEOUT'
        return result

    output = completed.stdout + completed.stderr
    match = re.search(r'Ran (\d+) test', output)
    if not match:
        result['status'] = 'NO TESTS' if completed.returncode == 0 else 'ERROR'
        return result

    result['total'] = int(match.group(1))
    failure_match = re.search(r'failures=(\d+)', output)
    error_match = re.search(r'errors=(\d+)', output)
    result['failed'] = sum(int(m.group(1)) for m in (failure_match, error_match) if m)
    result['passed'] = result['total'] - result['failed']
    result['status'] = 'OK' if completed.returncode == 0 else 'FAILED'
    return result


def main():
    print("=" * 80)
    print("NULLIFIER TEST SUITE SUMMARY")
    print("=" * 80)
    print()

    results = []
    for module in TEST_MODULES:
        print(f"Running {module}...", end=' ', flush=True)
        result = run_tests(module)
        results.append(result)
        print(f"{result['status']} - {result['total']} tests")

    total_tests = sum(r['total'] for r in results)
    total_passed = sum(r['passed'] for r in results)
    total_failed = sum(r['failed'] for r in results)

    print()
    print("=" * 80)
    print(f"Total Tests: {total_tests}")
    print(f"Passed: {total_passed}")
    print(f"Failed: {total_failed}")
    print()
    for result in results:
        status_icon = "OK  " if result['status'] == 'OK' else "FAIL"
        print(f"{status_icon} {result['module']:50} {result['passed']:4}/{result['total']:4} passed")
    print("=" * 80)

    all_ok = all(r['status'] == 'OK' for r in results)
    sys.exit(0 if all_ok else 1)


if __name__ == '__main__':
    main()
