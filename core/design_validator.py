"""
Design Validation Service
Handles validation of incomplete block design parameters
"""

import numbers
from typing import Any, Iterable, List, Tuple
from config.design_config import (
    MIN_TREATMENTS,
    MIN_BLOCK_SIZE,
    MIN_REPLICATIONS,
    MIN_LOCATIONS,
    LOCATION_PLOT_OFFSET,
    MAX_PLOTS_PER_LOCATION,
    ERROR_MESSAGES,
)


class DesignValidationError(ValueError):
    """Raised when design parameters cannot produce a resolvable block design"""


class DesignValidator:
    """Validator for incomplete block design parameters and constraints"""

    @staticmethod
    def _is_integer(value: Any) -> bool:
        return isinstance(value, numbers.Integral) and not isinstance(value, bool)

    @staticmethod
    def validate_treatment_count(t: Any) -> Tuple[bool, str]:
        """
        Validate the number of treatments.

        Args:
            t: Number of treatments

        Returns:
            Tuple of (is_valid, error_message)

        Examples:
            >>> DesignValidator.validate_treatment_count(12)
            (True, '')
            >>> DesignValidator.validate_treatment_count(1)
            (False, 'Number of treatments must be at least 2')
        """
        if not DesignValidator._is_integer(t):
            return False, ERROR_MESSAGES["not_integer"].format(name="Number of treatments")

        if t < MIN_TREATMENTS:
            return False, ERROR_MESSAGES["min_treatments"]

        return True, ""

    @staticmethod
    def validate_block_size(t: Any, k: Any) -> Tuple[bool, str]:
        """
        Validate the block size against the number of treatments.

        The block size must divide the treatment count so every replicate
        splits into t/k complete incomplete blocks.

        Args:
            t: Number of treatments
            k: Plots per incomplete block

        Returns:
            Tuple of (is_valid, error_message)

        Examples:
            >>> DesignValidator.validate_block_size(12, 3)
            (True, '')
            >>> DesignValidator.validate_block_size(10, 3)[0]
            False
        """
        if not DesignValidator._is_integer(k):
            return False, ERROR_MESSAGES["not_integer"].format(name="Block size")

        if k < MIN_BLOCK_SIZE:
            return False, ERROR_MESSAGES["min_block_size"]

        if k > t:
            return False, ERROR_MESSAGES["block_size_too_large"].format(k=k, t=t)

        if t % k != 0:
            return False, ERROR_MESSAGES["not_divisible"].format(k=k, t=t)

        return True, ""

    @staticmethod
    def validate_replications(r: Any) -> Tuple[bool, str]:
        """Validate the number of replicates"""
        if not DesignValidator._is_integer(r):
            return False, ERROR_MESSAGES["not_integer"].format(name="Number of replications")

        if r < MIN_REPLICATIONS:
            return False, ERROR_MESSAGES["min_replications"]

        return True, ""

    @staticmethod
    def validate_locations(locations: Any) -> Tuple[bool, str]:
        """Validate the number of locations"""
        if not DesignValidator._is_integer(locations):
            return False, ERROR_MESSAGES["not_integer"].format(name="Number of locations")

        if locations < MIN_LOCATIONS:
            return False, ERROR_MESSAGES["min_locations"]

        return True, ""

    @staticmethod
    def validate_design_parameters(
        t: Any,
        k: Any,
        r: Any,
        locations: Any
    ) -> Tuple[bool, List[str]]:
        """
        Validate all design parameters at once.

        Args:
            t: Number of treatments
            k: Block size
            r: Number of replicates
            locations: Number of locations

        Returns:
            Tuple of (is_valid, errors)
            - is_valid: True if every check passed
            - errors: List of error messages, empty when valid

        Examples:
            >>> DesignValidator.validate_design_parameters(6, 2, 3, 1)
            (True, [])
        """
        errors = []

        is_valid, msg = DesignValidator.validate_treatment_count(t)
        if not is_valid:
            errors.append(msg)
        else:
            # Block size checks need a usable treatment count
            is_valid, msg = DesignValidator.validate_block_size(t, k)
            if not is_valid:
                errors.append(msg)

        for check, value in (
            (DesignValidator.validate_replications, r),
            (DesignValidator.validate_locations, locations),
        ):
            is_valid, msg = check(value)
            if not is_valid:
                errors.append(msg)

        return len(errors) == 0, errors

    @staticmethod
    def ensure_valid(t: Any, k: Any, r: Any, locations: Any) -> None:
        """
        Raise DesignValidationError if any parameter is invalid.

        Raises:
            DesignValidationError: With all error messages joined
        """
        is_valid, errors = DesignValidator.validate_design_parameters(t, k, r, locations)
        if not is_valid:
            raise DesignValidationError("; ".join(errors))

    @staticmethod
    def check_plot_numbering(t: int, r: int) -> Tuple[bool, List[str]]:
        """
        Check that one location's plots fit inside the location plot offset.

        Args:
            t: Number of treatments
            r: Number of replicates

        Returns:
            Tuple of (is_valid, warnings)
            - is_valid: Always True (warnings only)
            - warnings: List of warning messages

        Examples:
            >>> DesignValidator.check_plot_numbering(12, 2)
            (True, [])
        """
        warnings = []
        plots = t * r

        if plots > MAX_PLOTS_PER_LOCATION:
            warnings.append(
                ERROR_MESSAGES["plots_per_location"].format(plots=plots, offset=LOCATION_PLOT_OFFSET)
            )

        return True, warnings

    @staticmethod
    def validate_field_book_entries(entries: Iterable[int], t: Any) -> Tuple[bool, str]:
        """
        Validate that a field book's treatment ids are exactly 1..t.

        Args:
            entries: Treatment id of every row
            t: Number of treatments the field book is relabeled with

        Returns:
            Tuple of (is_valid, error_message)

        Examples:
            >>> DesignValidator.validate_field_book_entries([1, 2, 3, 3, 2, 1], 3)
            (True, '')
        """
        is_valid, msg = DesignValidator.validate_treatment_count(t)
        if not is_valid:
            return False, msg

        found = set(entries)
        expected = set(range(1, t + 1))
        if found != expected:
            unexpected = sorted(found - expected)
            missing = sorted(expected - found)
            return False, ERROR_MESSAGES["entries_mismatch"].format(
                t=t, unexpected=unexpected, missing=missing
            )

        return True, ""
